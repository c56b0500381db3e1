"""System default field mappings per event type.

These rows seed ``default_field_mappings``; tenants receive a copy of the set
for an event type the first time that event is dispatched for them.
"""

from typing import Any

from leadflow.persistence.models.field_mapping import DataDomain, Formatter, RecipientRole

EVENT_TYPES = [
    "quote-initial",
    "quote-verified",
    "save-quote",
    "survey-submitted",
    "esurvey-submitted",
    "checkout-monthly",
    "checkout-pay-later",
    "checkout-stripe",
    "enquiry-submitted",
    "callback-requested",
]

PRODUCT_CARD_TEMPLATE = (
    '<div style="border:1px solid #e5e7eb;border-radius:8px;padding:16px;margin-bottom:12px;">'
    '<h3 style="margin:0 0 8px;color:{{primaryColor}};">{{name}}</h3>'
    "{{#if power}}<p style=\"margin:0;\">Output: {{power}}</p>{{/if}}"
    "{{#if price}}<p style=\"margin:0;font-weight:bold;\">&pound;{{price}}</p>{{/if}}"
    "{{#each product_fields.specs}}<p style=\"margin:0;\">{{#each items}}{{this}} {{/each}}</p>{{/each}}"
    "</div>"
)

ADDON_CARD_TEMPLATE = (
    '<div style="padding:8px 0;border-bottom:1px solid #e5e7eb;">'
    "{{name}}{{#if quantity}} x {{quantity}}{{/if}}"
    "{{#if price}} - &pound;{{price}}{{/if}}"
    "</div>"
)

# (template_field_name, source_path, database_source, formatter, html_template)
_CONTACT_FIELDS = [
    ("first_name", "contact_details.first_name", DataDomain.QUOTE, Formatter.RAW, None),
    ("last_name", "contact_details.last_name", DataDomain.QUOTE, Formatter.RAW, None),
    ("email", "contact_details.email", DataDomain.QUOTE, Formatter.RAW, None),
    ("phone", "contact_details.phone", DataDomain.QUOTE, Formatter.PHONE, None),
    ("address", "selected_address", DataDomain.QUOTE, Formatter.ADDRESS, None),
    ("postcode", "selected_address.postcode", DataDomain.QUOTE, Formatter.RAW, None),
]

_QUOTE_FIELDS = [
    ("form_answers", "form_answers", DataDomain.QUOTE, Formatter.QA_LIST, None),
    ("quote_link", "quote_link", DataDomain.QUOTE, Formatter.RAW, None),
]

_PRODUCT_FIELDS = [
    ("product_name", "selected_products[0].name", DataDomain.PRODUCTS, Formatter.RAW, None),
    ("product_price", "selected_products[0].price", DataDomain.PRODUCTS, Formatter.CURRENCY, None),
    (
        "product_card",
        "selected_products[0]",
        DataDomain.PRODUCTS,
        Formatter.PRODUCT_CARD,
        PRODUCT_CARD_TEMPLATE,
    ),
    (
        "products_list",
        "selected_products",
        DataDomain.PRODUCTS,
        Formatter.PRODUCT_LIST,
        PRODUCT_CARD_TEMPLATE,
    ),
    (
        "addons_list",
        "selected_addons",
        DataDomain.ADDONS,
        Formatter.PRODUCT_LIST,
        ADDON_CARD_TEMPLATE,
    ),
]

_CHECKOUT_FIELDS = [
    ("order_total", "order_summary.total", DataDomain.CHECKOUT, Formatter.CURRENCY, None),
    ("installation_date", "installation_date", DataDomain.CHECKOUT, Formatter.DATE, None),
    ("payment_method", "payment_method", DataDomain.CHECKOUT, Formatter.RAW, None),
    ("monthly_payment", "finance.monthly_payment", DataDomain.CHECKOUT, Formatter.CURRENCY, None),
]

_SURVEY_FIELDS = [
    ("survey_answers", "survey_answers", DataDomain.SURVEY, Formatter.QA_LIST, None),
    ("survey_date", "preferred_date", DataDomain.SURVEY, Formatter.DATE, None),
]

_ENQUIRY_FIELDS = [
    ("first_name", "first_name", DataDomain.ENQUIRY, Formatter.RAW, None),
    ("last_name", "last_name", DataDomain.ENQUIRY, Formatter.RAW, None),
    ("email", "email", DataDomain.ENQUIRY, Formatter.RAW, None),
    ("phone", "phone", DataDomain.ENQUIRY, Formatter.PHONE, None),
    ("message", "message", DataDomain.ENQUIRY, Formatter.RAW, None),
    ("preferred_time", "preferred_time", DataDomain.ENQUIRY, Formatter.RAW, None),
]

_COMPANY_FIELDS = [
    ("company_name", "company_name", DataDomain.PARTNER_PROFILE, Formatter.RAW, None),
    ("company_phone", "phone", DataDomain.PARTNER_PROFILE, Formatter.PHONE, None),
    ("logo_url", "logo_url", DataDomain.PARTNER_PROFILE, Formatter.RAW, None),
    ("primaryColor", "company_color", DataDomain.PARTNER_PROFILE, Formatter.RAW, None),
    ("website_url", "website_url", DataDomain.PARTNER_PROFILE, Formatter.RAW, None),
]

_FIELDS_BY_EVENT = {
    "quote-initial": _CONTACT_FIELDS + _QUOTE_FIELDS,
    "quote-verified": _CONTACT_FIELDS + _QUOTE_FIELDS + _PRODUCT_FIELDS,
    "save-quote": _CONTACT_FIELDS + _QUOTE_FIELDS + _PRODUCT_FIELDS,
    "survey-submitted": _CONTACT_FIELDS + _PRODUCT_FIELDS + _SURVEY_FIELDS,
    "esurvey-submitted": _CONTACT_FIELDS + _SURVEY_FIELDS,
    "checkout-monthly": _CONTACT_FIELDS + _PRODUCT_FIELDS + _CHECKOUT_FIELDS,
    "checkout-pay-later": _CONTACT_FIELDS + _PRODUCT_FIELDS + _CHECKOUT_FIELDS,
    "checkout-stripe": _CONTACT_FIELDS + _PRODUCT_FIELDS + _CHECKOUT_FIELDS,
    "enquiry-submitted": _ENQUIRY_FIELDS,
    "callback-requested": _ENQUIRY_FIELDS,
}


def default_rows(event_type: str) -> list[dict[str, Any]]:
    """Default mapping rows for one event type, for both recipient roles."""
    fields = _FIELDS_BY_EVENT.get(event_type, []) + _COMPANY_FIELDS
    rows = []
    for role in RecipientRole:
        for position, (name, path, domain, formatter, fragment) in enumerate(fields):
            rows.append({
                "event_type": event_type,
                "recipient_role": role.value,
                "position": position,
                "template_field_name": name,
                "source_path": path,
                "database_source": domain.value,
                "formatter": formatter.value,
                "html_template": fragment,
            })
    return rows


def all_default_rows() -> list[dict[str, Any]]:
    """Default mapping rows for every known event type."""
    rows = []
    for event_type in EVENT_TYPES:
        rows.extend(default_rows(event_type))
    return rows
