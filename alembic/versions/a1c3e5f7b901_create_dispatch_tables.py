"""create_dispatch_tables

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-19 09:12:41.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b901'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('subdomain', sa.String(length=100), nullable=True),
        sa.Column('custom_domain', sa.String(length=255), nullable=True),
        sa.Column('domain_verified', sa.Boolean(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('admin_email', sa.String(length=255), nullable=True),
        sa.Column('contact_person', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('postcode', sa.String(length=20), nullable=True),
        sa.Column('website_url', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('company_color', sa.String(length=20), nullable=True),
        sa.Column('privacy_policy', sa.Text(), nullable=True),
        sa.Column('terms_conditions', sa.Text(), nullable=True),
        sa.Column('smtp_settings', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_tenants_id', 'tenants', ['id'])
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'], unique=True)
    op.create_index('ix_tenants_custom_domain', 'tenants', ['custom_domain'], unique=True)

    op.create_table(
        'service_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_service_categories_id', 'service_categories', ['id'])
    op.create_index('ix_service_categories_slug', 'service_categories', ['slug'], unique=True)

    op.create_table(
        'tenant_category_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False, index=True),
        sa.Column('service_category_id', sa.Integer(), sa.ForeignKey('service_categories.id'), nullable=False, index=True),
        sa.Column('admin_email', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('tenant_id', 'service_category_id', name='uq_tenant_category_settings'),
    )

    op.create_table(
        'email_field_mappings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False, index=True),
        sa.Column('service_category_id', sa.Integer(), sa.ForeignKey('service_categories.id'), nullable=False, index=True),
        sa.Column('event_type', sa.String(length=100), nullable=False, index=True),
        sa.Column('recipient_role', sa.String(length=20), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('template_field_name', sa.String(length=255), nullable=False),
        sa.Column('source_path', sa.Text(), nullable=False),
        sa.Column('database_source', sa.String(length=100), nullable=True),
        sa.Column('formatter', sa.String(length=50), nullable=False, server_default='raw'),
        sa.Column('html_template', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            'tenant_id', 'service_category_id', 'event_type', 'recipient_role', 'template_field_name',
            name='uq_email_field_mappings_target',
        ),
    )

    op.create_table(
        'default_field_mappings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_type', sa.String(length=100), nullable=False, index=True),
        sa.Column('recipient_role', sa.String(length=20), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('template_field_name', sa.String(length=255), nullable=False),
        sa.Column('source_path', sa.Text(), nullable=False),
        sa.Column('database_source', sa.String(length=100), nullable=True),
        sa.Column('formatter', sa.String(length=50), nullable=False, server_default='raw'),
        sa.Column('html_template', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            'event_type', 'recipient_role', 'template_field_name',
            name='uq_default_field_mappings_target',
        ),
    )

    op.create_table(
        'email_templates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False, index=True),
        sa.Column('service_category_id', sa.Integer(), sa.ForeignKey('service_categories.id'), nullable=False, index=True),
        sa.Column('event_type', sa.String(length=100), nullable=False, index=True),
        sa.Column('recipient_role', sa.String(length=20), nullable=False),
        sa.Column('subject_template', sa.Text(), nullable=False, server_default=''),
        sa.Column('html_template', sa.Text(), nullable=False, server_default=''),
        sa.Column('text_template', sa.Text(), nullable=True),
        sa.Column('styling', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        'uq_email_templates_active',
        'email_templates',
        ['tenant_id', 'service_category_id', 'event_type', 'recipient_role'],
        unique=True,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active'),
    )

    op.create_table(
        'notification_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False, index=True),
        sa.Column('service_category_id', sa.Integer(), sa.ForeignKey('service_categories.id'), nullable=False, index=True),
        sa.Column('event_type', sa.String(length=100), nullable=False),
        sa.Column('customer_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('admin_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('admin_emails', sa.JSON(), nullable=True),
        sa.Column('crm_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('tenant_id', 'service_category_id', 'event_type', name='uq_notification_settings_event'),
    )

    op.create_table(
        'lead_submission_data',
        sa.Column('submission_id', sa.String(length=64), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id'), nullable=False, index=True),
        sa.Column('service_category_id', sa.Integer(), sa.ForeignKey('service_categories.id'), nullable=True, index=True),
        sa.Column('quote_data', sa.JSON(), nullable=True),
        sa.Column('products_data', sa.JSON(), nullable=True),
        sa.Column('addons_data', sa.JSON(), nullable=True),
        sa.Column('checkout_data', sa.JSON(), nullable=True),
        sa.Column('survey_data', sa.JSON(), nullable=True),
        sa.Column('enquiry_data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('lead_submission_data')
    op.drop_table('notification_settings')
    op.drop_index('uq_email_templates_active', table_name='email_templates')
    op.drop_table('email_templates')
    op.drop_table('default_field_mappings')
    op.drop_table('email_field_mappings')
    op.drop_table('tenant_category_settings')
    op.drop_index('ix_service_categories_slug', table_name='service_categories')
    op.drop_index('ix_service_categories_id', table_name='service_categories')
    op.drop_table('service_categories')
    op.drop_index('ix_tenants_custom_domain', table_name='tenants')
    op.drop_index('ix_tenants_subdomain', table_name='tenants')
    op.drop_index('ix_tenants_id', table_name='tenants')
    op.drop_table('tenants')
