"""Tenant, service category and tenant-category settings models."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from leadflow.persistence.database import Base


class Tenant(Base):
    """Installer business operating its own storefront under a distinct hostname."""

    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    # Routing keys
    subdomain = Column(String(100), unique=True, nullable=True, index=True)
    custom_domain = Column(String(255), unique=True, nullable=True, index=True)
    domain_verified = Column(Boolean, nullable=True)

    # Soft-disable; tenants are never deleted
    is_active = Column(Boolean, default=True, nullable=False)

    # Fallback admin recipient when no per-event list is configured
    admin_email = Column(String(255), nullable=True)

    # Company information exposed to templates
    contact_person = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    postcode = Column(String(20), nullable=True)
    website_url = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)
    company_color = Column(String(20), nullable=True)
    privacy_policy = Column(Text, nullable=True)
    terms_conditions = Column(Text, nullable=True)

    # Mail-relay credentials, one Fernet-encrypted value per key
    # Schema: {"SMTP_HOST": "enc:...", "SMTP_PORT": "enc:...", ...}
    smtp_settings = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    category_settings = relationship(
        "TenantCategorySettings", back_populates="tenant", cascade="all, delete-orphan"
    )

    def profile_fields(self) -> dict[str, str | None]:
        """Company fields made available to mapping rules as ``partner_profile``."""
        return {
            "company_name": self.name,
            "contact_person": self.contact_person,
            "phone": self.phone,
            "address": self.address,
            "postcode": self.postcode,
            "website_url": self.website_url,
            "logo_url": self.logo_url,
            "company_color": self.company_color,
            "privacy_policy": self.privacy_policy,
            "terms_conditions": self.terms_conditions,
        }

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name}, subdomain={self.subdomain})>"


class ServiceCategory(Base):
    """A named vertical (e.g. boiler) scoping mappings, templates and settings."""

    __tablename__ = "service_categories"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<ServiceCategory(id={self.id}, slug={self.slug})>"


class TenantCategorySettings(Base):
    """Category-scoped tenant settings."""

    __tablename__ = "tenant_category_settings"
    __table_args__ = (
        UniqueConstraint("tenant_id", "service_category_id", name="uq_tenant_category_settings"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    service_category_id = Column(
        Integer, ForeignKey("service_categories.id"), nullable=False, index=True
    )

    # Takes precedence over Tenant.admin_email for this category
    admin_email = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="category_settings")
    service_category = relationship("ServiceCategory")

    def __repr__(self) -> str:
        return (
            f"<TenantCategorySettings(tenant_id={self.tenant_id}, "
            f"service_category_id={self.service_category_id})>"
        )
