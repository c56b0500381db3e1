"""Per-event notification channel settings."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from leadflow.persistence.database import Base


class NotificationSettings(Base):
    """Channel toggles for one (tenant, category, event type).

    A missing row means every channel is enabled.
    """

    __tablename__ = "notification_settings"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "service_category_id", "event_type", name="uq_notification_settings_event"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    service_category_id = Column(
        Integer, ForeignKey("service_categories.id"), nullable=False, index=True
    )
    event_type = Column(String(100), nullable=False)

    customer_enabled = Column(Boolean, default=True, nullable=False)
    admin_enabled = Column(Boolean, default=True, nullable=False)
    # Schema: ["ops@example.com", "sales@example.com"]
    admin_emails = Column(JSON, nullable=True, default=list)
    crm_enabled = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<NotificationSettings(tenant_id={self.tenant_id}, event_type={self.event_type}, "
            f"customer={self.customer_enabled}, admin={self.admin_enabled}, crm={self.crm_enabled})>"
        )
