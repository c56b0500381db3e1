"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from leadflow.core.encryption import encrypt_settings, generate_encryption_key, reset_encryption_service
from leadflow.infrastructure.smtp_client import MailRelayClient, MailRelayError, OutboundEmail
from leadflow.persistence.database import Base, get_db
from leadflow.persistence.models import *  # noqa: F401, F403
from leadflow.persistence.models import EmailTemplate, ServiceCategory, Tenant
from leadflow.persistence.repositories.field_mapping_repository import FieldMappingRepository
from leadflow.persistence.seeds.default_mappings import all_default_rows
from leadflow.settings import settings


class FakeRelay(MailRelayClient):
    """In-memory mail relay recording every attempt."""

    def __init__(self, fail_for: tuple[str, ...] = (), verify_error: str | None = None):
        self.fail_for = set(fail_for)
        self.verify_error = verify_error
        self.verify_calls = 0
        self.attempts: list[OutboundEmail] = []
        self.delivered: list[OutboundEmail] = []
        self.smtp_settings = None

    async def verify(self) -> None:
        self.verify_calls += 1
        if self.verify_error:
            raise MailRelayError(self.verify_error)

    async def send(self, message: OutboundEmail) -> None:
        self.attempts.append(message)
        if message.to in self.fail_for:
            raise MailRelayError("550 mailbox unavailable")
        self.delivered.append(message)

    def factory(self, smtp_settings):
        self.smtp_settings = smtp_settings
        return self


SMTP_CREDENTIALS = {
    "SMTP_HOST": "smtp.acme.test",
    "SMTP_PORT": 587,
    "SMTP_SECURE": False,
    "SMTP_USER": "mailer@acme.test",
    "SMTP_PASSWORD": "app-password",
    "SMTP_FROM": "quotes@acme.test",
}


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def encryption_key(monkeypatch):
    """Configure a fresh Fernet key for the test."""
    key = generate_encryption_key()
    monkeypatch.setattr(settings, "field_encryption_key", key)
    reset_encryption_service()
    yield key
    reset_encryption_service()


@pytest.fixture
def fake_relay():
    return FakeRelay()


@pytest.fixture
async def category(db_session):
    category = ServiceCategory(slug="boiler", name="Boiler")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest.fixture
async def tenant(db_session, encryption_key):
    """Active tenant with encrypted SMTP credentials."""
    tenant = Tenant(
        name="Acme Heating",
        subdomain="acme",
        custom_domain="quotes.acmeheating.co.uk",
        admin_email="owner@acme.test",
        phone="01632 960123",
        company_color="#ff6600",
        is_active=True,
        smtp_settings=encrypt_settings(SMTP_CREDENTIALS),
    )
    db_session.add(tenant)
    await db_session.commit()
    await db_session.refresh(tenant)
    return tenant


@pytest.fixture
async def default_mappings(db_session):
    """System default rule set loaded into the database."""
    await FieldMappingRepository(db_session).upsert_defaults(all_default_rows())


@pytest.fixture
async def templates(db_session, tenant, category):
    """Customer and admin templates for the quote-initial event."""
    customer = EmailTemplate(
        tenant_id=tenant.id,
        service_category_id=category.id,
        event_type="quote-initial",
        recipient_role="customer",
        subject_template="Your quote from {{company_name}}",
        html_template=(
            '<h1 style="color:{{primaryColor}}">Hi {{first_name}}</h1>'
            "{{#if address}}<p>{{address}}</p>{{/if}}"
        ),
        text_template="Hi {{first_name}}, call {{phone}}",
        is_active=True,
    )
    admin = EmailTemplate(
        tenant_id=tenant.id,
        service_category_id=category.id,
        event_type="quote-initial",
        recipient_role="admin",
        subject_template="New lead: {{first_name}} {{last_name}}",
        html_template="<p>{{first_name}} ({{email}})</p><pre>{{form_answers}}</pre>",
        text_template="Lead {{first_name}} {{phone}}",
        is_active=True,
    )
    db_session.add_all([customer, admin])
    await db_session.commit()
    return {"customer": customer, "admin": admin}


@pytest.fixture
def lead_record():
    """Lead record shaped like a quote-initial submission."""
    return {
        "submission_id": "sub-123",
        "quote_data": {
            "contact_details": {
                "first_name": "John",
                "last_name": "Smith",
                "email": "john@example.com",
                "phone": "07123456789",
            },
            "selected_address": {
                "address_line_1": "123 Main St",
                "town_or_city": "London",
                "postcode": "SW1A 1AA",
            },
            "form_answers": {
                "q1": {"question_text": "Boiler type", "answer": "Combi"},
                "q2": {"question_text": "Bathrooms", "answer": ["1", "2"]},
            },
        },
        "products_data": {
            "selected_products": [
                {"name": "Worcester 4000", "power": "30kW", "price": 2500},
            ],
        },
    }


@pytest.fixture
async def client(db_session, fake_relay):
    """Create a test HTTP client against the FastAPI app."""
    from httpx import ASGITransport, AsyncClient

    from leadflow.api.deps import get_relay_factory
    from leadflow.main import app

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_relay_factory] = lambda: fake_relay.factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://acme.leadflow.test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
