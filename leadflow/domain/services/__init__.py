"""Domain services."""

from leadflow.domain.services.dispatch_service import (
    DispatchResult,
    DispatchService,
    dispatch_submission,
)
from leadflow.domain.services.mapping_registry import MappingRegistry
from leadflow.domain.services.notification_channels import (
    ChannelConfig,
    NotificationChannelResolver,
)
from leadflow.domain.services.tenant_resolver import TenantResolver, effective_hostname

__all__ = [
    "ChannelConfig",
    "DispatchResult",
    "DispatchService",
    "MappingRegistry",
    "NotificationChannelResolver",
    "TenantResolver",
    "dispatch_submission",
    "effective_hostname",
]
