"""
Reference Data Models
---------------------
Pydantic request models for the reference-data entities.

Each model declares the client-writable fields of one table with their types,
length bounds, nullability and defaults. Tenant and audit columns are never
accepted from the client; unknown fields are ignored.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ReferenceRecord(BaseModel):
    """Base for reference-data request bodies."""

    model_config = ConfigDict(extra="ignore")


class BankRecord(ReferenceRecord):
    account_number: str = Field(..., min_length=1, max_length=30)
    bank_name: str = Field(..., min_length=1, max_length=100)
    bank_branch: Optional[str] = Field(default=None, max_length=100)
    currency: Optional[str] = Field(default=None, max_length=3)
    description: Optional[str] = Field(default=None, max_length=500)
    is_default: bool = Field(
        default=False, description="At most one default account per company"
    )
    is_active: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "account_number": "0123-456789",
                "bank_name": "First National",
                "bank_branch": "Downtown",
                "currency": "USD",
                "is_default": True,
                "is_active": True,
            }
        }


class CounterpartyRecord(ReferenceRecord):
    """Suppliers, buyers, repairers, transporters, shippers and journal parties."""

    code: str = Field(..., min_length=1, max_length=25)
    name: Optional[str] = Field(default=None, max_length=100)
    address1: Optional[str] = Field(default=None, max_length=255)
    address2: Optional[str] = Field(default=None, max_length=255)
    address3: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=25)
    mobile: Optional[str] = Field(default=None, max_length=25)
    fax: Optional[str] = Field(default=None, max_length=25)
    email: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = True
    comment: Optional[str] = Field(default=None, max_length=255)
    is_supplier: Optional[bool] = False
    is_buyer: Optional[bool] = False
    is_repair: Optional[bool] = False
    is_localtransport: Optional[bool] = False
    is_shipper: Optional[bool] = False
    is_journal: Optional[bool] = False


class CountryRecord(ReferenceRecord):
    code: str = Field(..., min_length=2, max_length=3)
    name: str = Field(..., min_length=1, max_length=100)
    is_targetcountry: bool = False


class VehicleTypeRecord(ReferenceRecord):
    vehicle_type: str = Field(..., min_length=1, max_length=100)


class LocationRecord(ReferenceRecord):
    name: str = Field(..., min_length=1, max_length=100)


class ColorRecord(ReferenceRecord):
    color: str = Field(..., min_length=1, max_length=50)


class MakerRecord(ReferenceRecord):
    name: str = Field(..., min_length=1, max_length=100)


class ChartOfAccountRecord(ReferenceRecord):
    account_code: str = Field(..., min_length=1, max_length=50)
    account_name: str = Field(..., min_length=1, max_length=100)
    account_type: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=250)
    is_active: bool = True


class FuelTypeRecord(ReferenceRecord):
    name: str = Field(..., min_length=1, max_length=10)
    description: Optional[str] = Field(default=None, max_length=50)
