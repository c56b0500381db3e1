"""Dispatch coordinator: renders and sends notifications for one lead event."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.core.encryption import EncryptionError, decrypt_settings
from leadflow.core.errors import CategoryNotFoundError, DispatchError, SubmissionNotFoundError
from leadflow.core.tenant_context import (
    clear_tenant_context,
    set_submission_context,
    set_tenant_context,
)
from leadflow.domain.services.field_extraction import extract
from leadflow.domain.services.mapping_registry import MappingRegistry
from leadflow.domain.services.notification_channels import (
    ChannelConfig,
    NotificationChannelResolver,
)
from leadflow.domain.services.template_renderer import RenderedEmail, render_email
from leadflow.domain.services.tenant_resolver import TenantResolver
from leadflow.infrastructure.smtp_client import (
    MailRelayClient,
    MailRelayError,
    OutboundEmail,
    SmtpRelayClient,
    SmtpSettings,
)
from leadflow.persistence.models.field_mapping import DataDomain, RecipientRole
from leadflow.persistence.models.tenant import ServiceCategory, Tenant
from leadflow.persistence.repositories.email_template_repository import EmailTemplateRepository
from leadflow.persistence.repositories.lead_submission_repository import LeadSubmissionRepository
from leadflow.persistence.repositories.tenant_repository import ServiceCategoryRepository
from leadflow.settings import settings

logger = logging.getLogger(__name__)

CUSTOMER_ADDRESS_FIELDS = ("email", "customer_email")

RelayFactory = Callable[[SmtpSettings], MailRelayClient]


@dataclass
class DispatchResult:
    """Outcome of one dispatch. Never persisted."""

    customer_email_sent: bool = False
    admin_email_sent: bool = False
    ghl_integration_eligible: bool = False
    errors: list[str] = field(default_factory=list)
    attempted: list[str] = field(default_factory=list)
    config: ChannelConfig | None = None

    def to_response(self) -> dict[str, Any]:
        """JSON shape returned to callers."""
        return {
            "customerEmailSent": self.customer_email_sent,
            "adminEmailSent": self.admin_email_sent,
            "ghlIntegrationEligible": self.ghl_integration_eligible,
            "errors": list(self.errors),
            "config": self.config.to_dict() if self.config else None,
        }


@dataclass
class _RoleRender:
    bag: dict[str, Any]
    email: RenderedEmail


class DispatchService:
    """Runs credential checks, rendering and per-recipient sends."""

    def __init__(self, session: AsyncSession, relay_factory: RelayFactory | None = None) -> None:
        self.session = session
        self.relay_factory = relay_factory or SmtpRelayClient
        self.registry = MappingRegistry(session)
        self.template_repo = EmailTemplateRepository(session)
        self.channel_resolver = NotificationChannelResolver(session)

    async def prepare_relay(self, tenant: Tenant) -> tuple[MailRelayClient, SmtpSettings]:
        """Decrypt, normalize and verify the tenant's relay credentials.

        Raises:
            DispatchError: If credentials are missing, incomplete, undecryptable
                or rejected by the relay
        """
        if not tenant.smtp_settings:
            raise DispatchError("SMTP settings not configured", kind="smtp_not_configured")

        try:
            decrypted = decrypt_settings(tenant.smtp_settings)
        except EncryptionError as e:
            logger.error(f"Failed to decrypt SMTP settings for tenant_id={tenant.id}: {e}")
            raise DispatchError("Failed to decrypt SMTP settings", kind="credentials_unusable") from e

        smtp_settings = SmtpSettings.from_settings(decrypted)
        if not smtp_settings.is_complete:
            raise DispatchError("Incomplete SMTP settings", kind="smtp_incomplete")

        relay = self.relay_factory(smtp_settings)
        try:
            await relay.verify()
        except (MailRelayError, asyncio.TimeoutError) as e:
            logger.warning(f"SMTP verification failed for tenant_id={tenant.id}: {e}")
            raise DispatchError(str(e) or "SMTP verification failed", kind="smtp_verification_failed") from e

        return relay, smtp_settings

    async def render_role(
        self,
        tenant: Tenant,
        category: ServiceCategory,
        event_type: str,
        role: RecipientRole,
        record: Mapping[str, Any],
    ) -> _RoleRender | None:
        """Extract and render for one recipient role; None without a template."""
        template = await self.template_repo.get_active(tenant.id, category.id, event_type, role.value)
        if template is None:
            logger.info(f"No active {role.value} template for event_type={event_type}")
            return None

        rules = await self.registry.get_rules(tenant.id, category.id, event_type, role)
        bag = extract(record, rules)
        return _RoleRender(bag=bag, email=render_email(template, bag))

    async def _send(self, relay: MailRelayClient, message: OutboundEmail) -> str | None:
        """Send one message; returns an error string instead of raising."""
        try:
            await asyncio.wait_for(relay.send(message), timeout=settings.smtp_send_timeout_seconds)
        except asyncio.TimeoutError:
            return f"timed out after {settings.smtp_send_timeout_seconds:g}s"
        except Exception as e:
            return str(e) or e.__class__.__name__
        return None

    async def _send_admins(
        self,
        relay: MailRelayClient,
        sender: str,
        rendered: RenderedEmail,
        addresses: list[str],
    ) -> list[tuple[str, str | None]]:
        semaphore = asyncio.Semaphore(max(1, settings.admin_send_concurrency))

        async def worker(address: str) -> tuple[str, str | None]:
            async with semaphore:
                message = OutboundEmail(
                    from_address=sender,
                    to=address,
                    subject=rendered.subject,
                    html=rendered.html,
                    text=rendered.text,
                )
                return address, await self._send(relay, message)

        return list(await asyncio.gather(*(worker(address) for address in addresses)))

    async def dispatch(
        self,
        tenant: Tenant,
        category: ServiceCategory,
        event_type: str,
        record: Mapping[str, Any],
    ) -> DispatchResult:
        """Dispatch all enabled channels for one lead event.

        Only pre-send credential problems raise; per-recipient failures are
        collected on the result.

        Raises:
            DispatchError: If the tenant's mail relay cannot be used
        """
        relay, smtp_settings = await self.prepare_relay(tenant)

        await self.registry.ensure_defaults(tenant.id, category.id, event_type)

        record = dict(record)
        record.setdefault(DataDomain.PARTNER_PROFILE.value, tenant.profile_fields())

        customer = await self.render_role(tenant, category, event_type, RecipientRole.CUSTOMER, record)
        admin = await self.render_role(tenant, category, event_type, RecipientRole.ADMIN, record)

        channels = await self.channel_resolver.resolve(tenant, category.id, event_type)
        result = DispatchResult(config=channels, ghl_integration_eligible=channels.crm.enabled)
        sender = smtp_settings.sender

        # Customer
        if channels.customer.enabled and customer is not None:
            address = next(
                (customer.bag[key] for key in CUSTOMER_ADDRESS_FIELDS if customer.bag.get(key)),
                None,
            )
            if address:
                result.attempted.append(str(address))
                error = await self._send(
                    relay,
                    OutboundEmail(
                        from_address=sender,
                        to=str(address),
                        subject=customer.email.subject,
                        html=customer.email.html,
                        text=customer.email.text,
                    ),
                )
                if error is None:
                    result.customer_email_sent = True
                    logger.info(
                        "Customer email sent",
                        extra={"event_type": event_type, "recipient_role": "customer"},
                    )
                else:
                    result.errors.append(f"Customer email to {address}: {error}")
                    logger.warning(
                        f"Customer email failed: {error}",
                        extra={"event_type": event_type, "recipient_role": "customer"},
                    )
            else:
                logger.info(f"No customer address in lead data for event_type={event_type}")

        # Admin fan-out
        if channels.admin.should_send and admin is not None:
            result.attempted.extend(channels.admin.emails)
            outcomes = await self._send_admins(relay, sender, admin.email, channels.admin.emails)
            for address, error in outcomes:
                if error is None:
                    result.admin_email_sent = True
                    logger.info(
                        f"Admin email sent to {address}",
                        extra={"event_type": event_type, "recipient_role": "admin"},
                    )
                else:
                    result.errors.append(f"Admin email to {address}: {error}")
                    logger.warning(
                        f"Admin email to {address} failed: {error}",
                        extra={"event_type": event_type, "recipient_role": "admin"},
                    )

        return result


async def dispatch_submission(
    session: AsyncSession,
    *,
    category_slug: str,
    event_type: str,
    hostname: str | None = None,
    tenant_id: int | None = None,
    submission_id: str | None = None,
    record: Mapping[str, Any] | None = None,
    relay_factory: RelayFactory | None = None,
) -> DispatchResult:
    """Single entry point used by event handlers.

    Resolves the tenant (explicit id, else hostname) and the category, loads
    the lead record by submission id unless one is supplied, then dispatches.

    Raises:
        TenantNotFoundError: If no active tenant matches
        CategoryNotFoundError: If the category slug is unknown
        SubmissionNotFoundError: If no record is supplied and none is stored
        DispatchError: If the tenant's mail relay cannot be used
    """
    resolver = TenantResolver(session)
    if tenant_id is not None:
        tenant = await resolver.resolve_by_id(tenant_id)
    else:
        tenant = await resolver.resolve(hostname)

    set_tenant_context(tenant.id)
    set_submission_context(submission_id)
    try:
        category = await ServiceCategoryRepository(session).get_by_slug(category_slug)
        if category is None:
            raise CategoryNotFoundError(category_slug)

        if record is None:
            if not submission_id:
                raise SubmissionNotFoundError("<missing>")
            submission = await LeadSubmissionRepository(session).get_by_submission_id(
                tenant.id, submission_id
            )
            if submission is None:
                raise SubmissionNotFoundError(submission_id)
            record = submission.to_record()
        elif submission_id:
            record = {**record, "submission_id": submission_id}

        logger.info(f"Dispatching {event_type} for category={category_slug}")
        return await DispatchService(session, relay_factory).dispatch(
            tenant, category, event_type, record
        )
    finally:
        clear_tenant_context()
