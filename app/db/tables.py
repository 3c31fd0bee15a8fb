"""
Table Definitions
-----------------
SQLAlchemy Core tables for the dealer schema.

Reference-data tables are keyed by ``(company_id, <natural key>)``. The
transactional vehicle and accounting tables are declared only with the columns
needed to count references to counterparties and bank accounts; their
composite foreign keys use RESTRICT so the database refuses to delete a
referenced record.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKeyConstraint,
    Integer,
    MetaData,
    String,
    Table,
    Uuid,
    false,
    true,
)

metadata = MetaData()


def _audit_columns():
    return [
        Column("created_at", DateTime(timezone=True)),
        Column("created_by", String(50)),
        Column("updated_at", DateTime(timezone=True)),
        Column("updated_by", String(50)),
    ]


def _company_id(**kwargs):
    return Column("company_id", Uuid(as_uuid=False), nullable=False, **kwargs)


# ============================================================================
# TENANTS, USERS AND ROLES
# ============================================================================

ref_companies = Table(
    "ref_companies",
    metadata,
    _company_id(primary_key=True),
    Column("company_name", String(100), nullable=False),
    Column("country", String(3)),
    Column("email", String(50)),
    Column("is_active", Boolean),
    Column("base_currency", String(3)),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)

ref_roles = Table(
    "ref_roles",
    metadata,
    Column("role_name", String(25), primary_key=True),
    Column("description", String(50)),
)

ref_users = Table(
    "ref_users",
    metadata,
    Column("user_id", String(50), primary_key=True),
    _company_id(primary_key=True),
    Column("role_name", String(25)),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(50), nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("is_active", Boolean),
    Column("last_login_date", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)

# ============================================================================
# REFERENCE DATA
# ============================================================================

ref_bank = Table(
    "ref_bank",
    metadata,
    _company_id(primary_key=True),
    Column("account_number", String(30), primary_key=True),
    Column("bank_name", String(100), nullable=False),
    Column("bank_branch", String(100)),
    Column("currency", String(3)),
    Column("description", String(500)),
    Column("is_default", Boolean, server_default=false()),
    Column("is_active", Boolean, server_default=true()),
    *_audit_columns(),
)

ref_contact = Table(
    "ref_contact",
    metadata,
    _company_id(primary_key=True),
    Column("code", String(25), primary_key=True),
    Column("name", String(100)),
    Column("address1", String(255)),
    Column("address2", String(255)),
    Column("address3", String(255)),
    Column("phone", String(25)),
    Column("mobile", String(25)),
    Column("fax", String(25)),
    Column("email", String(50)),
    Column("is_active", Boolean),
    Column("comment", String(255)),
    Column("is_supplier", Boolean, server_default=false()),
    Column("is_buyer", Boolean, server_default=false()),
    Column("is_repair", Boolean, server_default=false()),
    Column("is_localtransport", Boolean, server_default=false()),
    Column("is_shipper", Boolean, server_default=false()),
    Column("is_journal", Boolean, server_default=false()),
    *_audit_columns(),
)

ref_country = Table(
    "ref_country",
    metadata,
    _company_id(primary_key=True),
    Column("code", String(3), primary_key=True),
    Column("name", String(100)),
    Column("is_targetcountry", Boolean, server_default=false()),
    *_audit_columns(),
)

ref_vehicle_type = Table(
    "ref_vehicle_type",
    metadata,
    _company_id(primary_key=True),
    Column("vehicle_type", String(100), primary_key=True),
    *_audit_columns(),
)

ref_location = Table(
    "ref_location",
    metadata,
    _company_id(primary_key=True),
    Column("name", String(100), primary_key=True),
    *_audit_columns(),
)

ref_color = Table(
    "ref_color",
    metadata,
    _company_id(primary_key=True),
    Column("color", String(50), primary_key=True),
    *_audit_columns(),
)

ref_maker = Table(
    "ref_maker",
    metadata,
    _company_id(primary_key=True),
    Column("name", String(100), primary_key=True),
    *_audit_columns(),
)

ref_coa = Table(
    "ref_coa",
    metadata,
    _company_id(primary_key=True),
    Column("account_code", String(50), primary_key=True),
    Column("account_name", String(100), nullable=False),
    Column("account_type", String(50), nullable=False),
    Column("description", String(250)),
    Column("is_active", Boolean, server_default=true()),
    *_audit_columns(),
)

# Global, shared by all companies
ref_fueltype = Table(
    "ref_fueltype",
    metadata,
    Column("name", String(10), primary_key=True),
    Column("description", String(50)),
)

# ============================================================================
# TRANSACTIONAL TABLES REFERENCING COUNTERPARTIES AND BANKS
# ============================================================================


def _contact_fk(column: str, name: str) -> ForeignKeyConstraint:
    return ForeignKeyConstraint(
        ["company_id", column],
        ["ref_contact.company_id", "ref_contact.code"],
        name=name,
        ondelete="RESTRICT",
        onupdate="RESTRICT",
    )


vehicle_purchase = Table(
    "vehicle_purchase",
    metadata,
    _company_id(primary_key=True),
    Column("chassis_no", String(50), primary_key=True),
    Column("purchase_date", Integer, nullable=False),
    Column("supplier_code", String(25), nullable=False),
    Column("purchase_cost", Float),
    _contact_fk("supplier_code", "fk_purchase_supplier"),
)

vehicle_sales = Table(
    "vehicle_sales",
    metadata,
    _company_id(primary_key=True),
    Column("chassis_no", String(50), primary_key=True),
    Column("sales_date", Integer),
    Column("buyer_code", String(25)),
    Column("sales_price", Float),
    _contact_fk("buyer_code", "fk_sales_buyer"),
)

vehicle_repair = Table(
    "vehicle_repair",
    metadata,
    _company_id(primary_key=True),
    Column("chassis_no", String(50), primary_key=True),
    Column("seq", Integer, primary_key=True),
    Column("repairer_code", String(25)),
    Column("repair_cost", Float),
    _contact_fk("repairer_code", "fk_repair_contact"),
)

vehicle_shipment = Table(
    "vehicle_shipment",
    metadata,
    _company_id(primary_key=True),
    Column("chassis_no", String(50), primary_key=True),
    Column("shipper_code", String(25)),
    Column("freight", Float),
    _contact_fk("shipper_code", "fk_shipment_shipper"),
)

vehicle_local_transport = Table(
    "vehicle_local_transport",
    metadata,
    _company_id(primary_key=True),
    Column("chassis_no", String(50), primary_key=True),
    Column("seq", Integer, primary_key=True),
    Column("local_transporter_code", String(25)),
    Column("cost", Float),
    _contact_fk("local_transporter_code", "fk_transport_transporter"),
)

t_banktrans = Table(
    "t_banktrans",
    metadata,
    _company_id(primary_key=True),
    Column("account_number", String(30), primary_key=True),
    Column("seq_no", BigInteger, primary_key=True),
    Column("transaction_date", Integer, nullable=False),
    Column("party_code", String(25)),
    Column("amount", Float),
    ForeignKeyConstraint(
        ["company_id", "account_number"],
        ["ref_bank.company_id", "ref_bank.account_number"],
        name="fk_banktrans__bank",
        ondelete="RESTRICT",
        onupdate="RESTRICT",
    ),
    _contact_fk("party_code", "fk_banktrans_contact"),
)

t_journal_entry = Table(
    "t_journal_entry",
    metadata,
    _company_id(primary_key=True),
    Column("date", Integer, primary_key=True),
    Column("counterparty_code", String(25), primary_key=True),
    Column("seq", Integer, primary_key=True, default=0),
    Column("amount", Float),
    _contact_fk("counterparty_code", "fk_journal_contact"),
)
