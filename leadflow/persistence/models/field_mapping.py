"""Field mapping models: tenant-owned rules and the system default rule set."""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from leadflow.persistence.database import Base


class RecipientRole(str, Enum):
    """Who a template and its mapping rules are addressed to."""

    CUSTOMER = "customer"
    ADMIN = "admin"


class Formatter(str, Enum):
    """Closed catalog of value formatters a mapping rule may name."""

    RAW = "raw"
    ADDRESS = "address"
    PHONE = "phone"
    QA_LIST = "qa_list"
    CURRENCY = "currency"
    DATE = "date"
    PRODUCT_CARD = "product_card"
    PRODUCT_LIST = "product_list"


class DataDomain(str, Enum):
    """Named partitions of a lead submission record."""

    QUOTE = "quote_data"
    PRODUCTS = "products_data"
    ADDONS = "addons_data"
    CHECKOUT = "checkout_data"
    SURVEY = "survey_data"
    ENQUIRY = "enquiry_data"
    PARTNER_PROFILE = "partner_profile"


class FieldMapping(Base):
    """Tenant-owned rule projecting one lead-data value into a template variable."""

    __tablename__ = "email_field_mappings"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id",
            "service_category_id",
            "event_type",
            "recipient_role",
            "template_field_name",
            name="uq_email_field_mappings_target",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    service_category_id = Column(
        Integer, ForeignKey("service_categories.id"), nullable=False, index=True
    )
    event_type = Column(String(100), nullable=False, index=True)
    recipient_role = Column(String(20), nullable=False)

    position = Column(Integer, default=0, nullable=False)
    template_field_name = Column(String(255), nullable=False)
    source_path = Column(Text, nullable=False)
    database_source = Column(String(100), nullable=True)  # Default data domain for source_path
    formatter = Column(String(50), default=Formatter.RAW.value, nullable=False)
    html_template = Column(Text, nullable=True)  # Card fragment for product formatters

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<FieldMapping(id={self.id}, tenant_id={self.tenant_id}, "
            f"event_type={self.event_type}, field={self.template_field_name})>"
        )


class DefaultFieldMapping(Base):
    """System default rule copied into a tenant's namespace on first use."""

    __tablename__ = "default_field_mappings"
    __table_args__ = (
        UniqueConstraint(
            "event_type",
            "recipient_role",
            "template_field_name",
            name="uq_default_field_mappings_target",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_type = Column(String(100), nullable=False, index=True)
    recipient_role = Column(String(20), nullable=False)

    position = Column(Integer, default=0, nullable=False)
    template_field_name = Column(String(255), nullable=False)
    source_path = Column(Text, nullable=False)
    database_source = Column(String(100), nullable=True)
    formatter = Column(String(50), default=Formatter.RAW.value, nullable=False)
    html_template = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<DefaultFieldMapping(event_type={self.event_type}, "
            f"role={self.recipient_role}, field={self.template_field_name})>"
        )
