"""Repository implementations."""

from leadflow.persistence.repositories.base import BaseRepository
from leadflow.persistence.repositories.email_template_repository import EmailTemplateRepository
from leadflow.persistence.repositories.field_mapping_repository import FieldMappingRepository
from leadflow.persistence.repositories.lead_submission_repository import LeadSubmissionRepository
from leadflow.persistence.repositories.notification_settings_repository import (
    NotificationSettingsRepository,
)
from leadflow.persistence.repositories.tenant_repository import (
    ServiceCategoryRepository,
    TenantCategorySettingsRepository,
    TenantRepository,
)

__all__ = [
    "BaseRepository",
    "EmailTemplateRepository",
    "FieldMappingRepository",
    "LeadSubmissionRepository",
    "NotificationSettingsRepository",
    "ServiceCategoryRepository",
    "TenantCategorySettingsRepository",
    "TenantRepository",
]
