"""Email template model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, text

from leadflow.persistence.database import Base


class EmailTemplate(Base):
    """Tenant-authored subject/html/text triple for one event and recipient role."""

    __tablename__ = "email_templates"
    __table_args__ = (
        # At most one active template per key tuple
        Index(
            "uq_email_templates_active",
            "tenant_id",
            "service_category_id",
            "event_type",
            "recipient_role",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    service_category_id = Column(
        Integer, ForeignKey("service_categories.id"), nullable=False, index=True
    )
    event_type = Column(String(100), nullable=False, index=True)
    recipient_role = Column(String(20), nullable=False)

    subject_template = Column(Text, nullable=False, default="")
    html_template = Column(Text, nullable=False, default="")
    text_template = Column(Text, nullable=True)

    # Theme overrides
    # Schema: {"primaryColor": "#...", "fontFamily": "...", "headerBgColor": "#...", "footerBgColor": "#..."}
    styling = Column(JSON, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<EmailTemplate(id={self.id}, tenant_id={self.tenant_id}, "
            f"event_type={self.event_type}, role={self.recipient_role})>"
        )
