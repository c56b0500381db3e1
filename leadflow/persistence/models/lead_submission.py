"""Lead submission record model."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String

from leadflow.persistence.database import Base
from leadflow.persistence.models.field_mapping import DataDomain

SUBMISSION_DOMAINS = (
    DataDomain.QUOTE.value,
    DataDomain.PRODUCTS.value,
    DataDomain.ADDONS.value,
    DataDomain.CHECKOUT.value,
    DataDomain.SURVEY.value,
    DataDomain.ENQUIRY.value,
)


class LeadSubmission(Base):
    """Lead data captured across funnel stages, one JSON document per domain."""

    __tablename__ = "lead_submission_data"

    submission_id = Column(String(64), primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    service_category_id = Column(
        Integer, ForeignKey("service_categories.id"), nullable=True, index=True
    )

    quote_data = Column(JSON, nullable=True)
    products_data = Column(JSON, nullable=True)
    addons_data = Column(JSON, nullable=True)
    checkout_data = Column(JSON, nullable=True)
    survey_data = Column(JSON, nullable=True)
    enquiry_data = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_record(self) -> dict[str, Any]:
        """Raw lead record keyed by data domain; empty domains are left out."""
        record: dict[str, Any] = {"submission_id": self.submission_id}
        for domain in SUBMISSION_DOMAINS:
            value = getattr(self, domain)
            if value is not None:
                record[domain] = value
        return record

    def __repr__(self) -> str:
        return f"<LeadSubmission(submission_id={self.submission_id}, tenant_id={self.tenant_id})>"
