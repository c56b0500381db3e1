"""Database models."""

from leadflow.persistence.models.email_template import EmailTemplate
from leadflow.persistence.models.field_mapping import (
    DataDomain,
    DefaultFieldMapping,
    FieldMapping,
    Formatter,
    RecipientRole,
)
from leadflow.persistence.models.lead_submission import LeadSubmission
from leadflow.persistence.models.notification_settings import NotificationSettings
from leadflow.persistence.models.tenant import ServiceCategory, Tenant, TenantCategorySettings

__all__ = [
    "Tenant",
    "ServiceCategory",
    "TenantCategorySettings",
    "FieldMapping",
    "DefaultFieldMapping",
    "Formatter",
    "RecipientRole",
    "DataDomain",
    "EmailTemplate",
    "NotificationSettings",
    "LeadSubmission",
]
