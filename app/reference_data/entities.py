"""
Reference Data Entities
-----------------------
Controller configurations for every reference-data entity exposed by the API.
"""

from typing import List

from app.auth.roles import ALL_ROLES, MANAGEMENT
from app.db.tables import (
    ref_bank,
    ref_coa,
    ref_color,
    ref_contact,
    ref_country,
    ref_fueltype,
    ref_location,
    ref_maker,
    ref_vehicle_type,
    t_banktrans,
    t_journal_entry,
    vehicle_local_transport,
    vehicle_purchase,
    vehicle_repair,
    vehicle_sales,
    vehicle_shipment,
)
from app.models.reference_data_models import (
    BankRecord,
    ChartOfAccountRecord,
    ColorRecord,
    CounterpartyRecord,
    CountryRecord,
    FuelTypeRecord,
    LocationRecord,
    MakerRecord,
    VehicleTypeRecord,
)
from app.reference_data.controller import (
    AllowedRoles,
    PrimaryKeyConfig,
    ReferenceDataConfig,
    trim,
    trim_upper,
)

BANKS = ReferenceDataConfig(
    table=ref_bank,
    entity_label="Bank",
    response_key="banks",
    record_key="bank",
    schema=BankRecord,
    primary_key=PrimaryKeyConfig("account_number", "company_id_account_number"),
    path="banks",
    order_by=[("is_active", "desc"), ("is_default", "desc"), ("account_number", "asc")],
    value_transform=trim,
    default_flag="is_default",
    references=[(t_banktrans, "account_number")],
)

COUNTERPARTIES = ReferenceDataConfig(
    table=ref_contact,
    entity_label="Counterparty",
    response_key="counterparties",
    record_key="counterparty",
    schema=CounterpartyRecord,
    primary_key=PrimaryKeyConfig("code", "company_id_code", url_param_name="code"),
    path="counterparties",
    order_by=[("name", "asc")],
    # codes are kept exactly as entered
    references=[
        (vehicle_purchase, "supplier_code"),
        (vehicle_sales, "buyer_code"),
        (vehicle_repair, "repairer_code"),
        (vehicle_shipment, "shipper_code"),
        (vehicle_local_transport, "local_transporter_code"),
        (t_banktrans, "party_code"),
        (t_journal_entry, "counterparty_code"),
    ],
)

COUNTRIES = ReferenceDataConfig(
    table=ref_country,
    entity_label="Country",
    response_key="countries",
    record_key="country",
    schema=CountryRecord,
    primary_key=PrimaryKeyConfig("code", "company_id_code"),
    path="countries",
    order_by=[("name", "asc")],
    allowed_roles=AllowedRoles(delete=MANAGEMENT),
    value_transform=trim_upper,
)

VEHICLE_TYPES = ReferenceDataConfig(
    table=ref_vehicle_type,
    entity_label="Vehicle type",
    response_key="vehicle_types",
    record_key="vehicle_type",
    schema=VehicleTypeRecord,
    primary_key=PrimaryKeyConfig("vehicle_type", "company_id_vehicle_type"),
    path="vehicle-types",
    value_transform=trim_upper,
)

LOCATIONS = ReferenceDataConfig(
    table=ref_location,
    entity_label="Location",
    response_key="locations",
    record_key="location",
    schema=LocationRecord,
    primary_key=PrimaryKeyConfig("name", "company_id_name"),
    path="locations",
    allowed_roles=AllowedRoles(delete=MANAGEMENT),
    value_transform=trim_upper,
)

COLORS = ReferenceDataConfig(
    table=ref_color,
    entity_label="Color",
    response_key="colors",
    record_key="color",
    schema=ColorRecord,
    primary_key=PrimaryKeyConfig("color", "company_id_color"),
    path="colors",
    value_transform=trim_upper,
)

MAKERS = ReferenceDataConfig(
    table=ref_maker,
    entity_label="Maker",
    response_key="makers",
    record_key="maker",
    schema=MakerRecord,
    primary_key=PrimaryKeyConfig("name", "company_id_name"),
    path="makers",
    allowed_roles=AllowedRoles(delete=MANAGEMENT),
    value_transform=trim_upper,
)

CHART_OF_ACCOUNTS = ReferenceDataConfig(
    table=ref_coa,
    entity_label="Account",
    response_key="coa",
    record_key="account",
    schema=ChartOfAccountRecord,
    primary_key=PrimaryKeyConfig("account_code", "company_id_account_code", "code"),
    path="chart-of-accounts",
    order_by=[("is_active", "desc"), ("account_code", "asc")],
    value_transform=trim,
)

# Shared by all companies and read only
FUEL_TYPES = ReferenceDataConfig(
    table=ref_fueltype,
    entity_label="Fuel type",
    response_key="fuel_types",
    record_key="fuel_type",
    schema=FuelTypeRecord,
    primary_key=PrimaryKeyConfig("name", "name"),
    path="fuel-types",
    allowed_roles=AllowedRoles(read=ALL_ROLES, create=None, update=None, delete=None),
    tenant_scoped=False,
)

REFERENCE_ENTITIES: List[ReferenceDataConfig] = [
    BANKS,
    COUNTERPARTIES,
    COUNTRIES,
    VEHICLE_TYPES,
    LOCATIONS,
    COLORS,
    MAKERS,
    CHART_OF_ACCOUNTS,
    FUEL_TYPES,
]
