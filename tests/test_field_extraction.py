"""Tests for the data extraction engine."""

from datetime import datetime, timezone
from types import SimpleNamespace

from leadflow.domain.services.field_extraction import (
    ABSENT,
    extract,
    normalize_path,
    resolve_path,
)
from leadflow.domain.services.template_renderer import render_string
from leadflow.persistence.models.field_mapping import FieldMapping

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)


def rule(name, path, formatter="raw", database_source=None, html_template=None):
    return SimpleNamespace(
        template_field_name=name,
        source_path=path,
        formatter=formatter,
        database_source=database_source,
        html_template=html_template,
    )


def test_normalize_path_brackets_and_dots():
    assert normalize_path("a[0].b") == ["a", "0", "b"]
    assert normalize_path("a.0.b") == ["a", "0", "b"]
    assert normalize_path("  a..b ") == ["a", "b"]


def test_resolve_path_walks_mappings_and_sequences():
    data = {"a": {"b": [{"c": 1}, {"c": 2}]}}
    assert resolve_path(data, "a.b[1].c") == 2
    assert resolve_path(data, "a.b.0.c") == 1


def test_resolve_path_missing_wrong_type_or_out_of_range_is_absent():
    data = {"a": {"b": [1], "s": "text"}}
    assert resolve_path(data, "a.x") is ABSENT
    assert resolve_path(data, "a.b[3]") is ABSENT
    assert resolve_path(data, "a.s.length") is ABSENT
    assert resolve_path(data, "a.b.first") is ABSENT


def test_present_none_is_kept():
    assert resolve_path({"a": None}, "a") is None


def test_extract_includes_only_resolved_rules(lead_record):
    rules = [
        rule("first_name", "quote_data.contact_details.first_name"),
        rule("surname", "quote_data.contact_details.surname"),
        rule("town", "quote_data.selected_address.town_or_city"),
        rule("installation", "checkout_data.installation_date", "date"),
    ]
    bag = extract(lead_record, rules, now=NOW)

    assert bag["first_name"] == "John"
    assert bag["town"] == "London"
    assert "surname" not in bag
    assert "installation" not in bag
    assert set(bag) == {"first_name", "town", "currentYear", "submissionId"}


def test_extract_database_source_scopes_path(lead_record):
    rules = [
        rule("product_name", "selected_products[0].name", database_source="products_data"),
        rule("address", "selected_address", "address", database_source="quote_data"),
        rule("whole_domain", "", database_source="products_data"),
    ]
    bag = extract(lead_record, rules, now=NOW)

    assert bag["product_name"] == "Worcester 4000"
    assert bag["address"] == "123 Main St, London, SW1A 1AA"
    assert bag["whole_domain"] == lead_record["products_data"]


def test_extract_cross_domain_prefix_overrides_database_source(lead_record):
    rules = [
        rule("price", "@products_data.selected_products[0].price", "currency", database_source="quote_data"),
    ]
    assert extract(lead_record, rules, now=NOW)["price"] == "2500.00"


def test_extract_missing_domain_is_absent(lead_record):
    rules = [rule("msg", "message", database_source="enquiry_data")]
    assert "msg" not in extract(lead_record, rules, now=NOW)


def test_formatter_without_value_omits_variable(lead_record):
    lead_record["products_data"]["selected_products"][0]["price"] = "POA"
    rules = [rule("price", "products_data.selected_products[0].price", "currency")]
    assert "price" not in extract(lead_record, rules, now=NOW)


def test_failing_rule_does_not_stop_others(lead_record):
    rules = [
        rule("broken", "quote_data.contact_details.first_name", "shout"),
        rule("first_name", "quote_data.contact_details.first_name"),
    ]
    bag = extract(lead_record, rules, now=NOW)

    assert "broken" not in bag
    assert bag["first_name"] == "John"


def test_qa_list_and_product_card(lead_record):
    rules = [
        rule("answers", "quote_data.form_answers", "qa_list"),
        rule(
            "card",
            "products_data.selected_products[0]",
            "product_card",
            html_template="{{name}} ({{power}})",
        ),
        rule(
            "cards",
            "products_data.selected_products",
            "product_list",
            html_template="<li>{{name}}</li>",
        ),
    ]
    bag = extract(lead_record, rules, now=NOW)

    assert bag["answers"] == "Boiler type: Combi\nBathrooms: 1, 2"
    assert bag["card"] == "Worcester 4000 (30kW)"
    assert bag["cards"] == "<li>Worcester 4000</li>"


def test_system_fields(lead_record):
    bag = extract(lead_record, [], now=NOW)
    assert bag == {"currentYear": 2026, "submissionId": "sub-123"}


def test_rule_can_override_system_field(lead_record):
    bag = extract(lead_record, [rule("currentYear", "quote_data.contact_details.first_name")], now=NOW)
    assert bag["currentYear"] == "John"


def test_extract_accepts_orm_rules(lead_record):
    mapping = FieldMapping(
        template_field_name="phone",
        source_path="quote_data.contact_details.phone",
        formatter="phone",
    )
    assert extract(lead_record, [mapping], now=NOW)["phone"] == "+447123456789"


def test_end_to_end_phone_rule_renders_into_text():
    record = {"quote_data": {"contact_details": {"first_name": "John", "phone": "07123456789"}}}
    rules = [rule("phone", "quote_data.contact_details.phone", "phone")]

    bag = extract(record, rules, now=NOW)

    assert render_string("Call {{phone}}", bag) == "Call +447123456789"
