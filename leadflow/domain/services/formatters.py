"""Value formatters applied by field mapping rules.

Formatters are pure functions over a resolved raw value. Each returns the
formatted value, or ``ABSENT`` when it cannot produce one so the variable is
left out of the bag rather than set to an empty or misleading value.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from leadflow.core.phone import format_phone_international
from leadflow.domain.services.template_renderer import render_string
from leadflow.persistence.models.field_mapping import Formatter
from leadflow.settings import settings

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for a value that is not present in the lead record."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

ADDRESS_PARTS = ("address_line_1", "address_line_2", "town_or_city", "postcode")


def format_raw(value: Any, html_template: str | None = None) -> Any:
    return value


def format_address(value: Any, html_template: str | None = None) -> Any:
    """Prefer ``formatted_address``, else join the non-empty address parts.

    A plain string is taken to be an already formatted address.
    """
    if isinstance(value, str):
        return value if value.strip() else ABSENT
    if not isinstance(value, Mapping):
        return ABSENT

    formatted = value.get("formatted_address")
    if isinstance(formatted, str) and formatted.strip():
        return formatted

    parts = [str(value[key]).strip() for key in ADDRESS_PARTS if value.get(key)]
    parts = [part for part in parts if part]
    return ", ".join(parts) if parts else ABSENT


def format_phone(value: Any, html_template: str | None = None) -> Any:
    if value is None or value == "":
        return ABSENT
    return format_phone_international(str(value), settings.phone_country_code)


def _answer_text(answer: Any) -> str:
    if isinstance(answer, (list, tuple)):
        return ", ".join(str(item) for item in answer)
    if answer is None:
        return ""
    return str(answer)


def format_qa_list(value: Any, html_template: str | None = None) -> Any:
    """One ``question: answer`` line per entry, in insertion order."""
    if not isinstance(value, Mapping):
        return ABSENT

    lines = []
    for question_id, entry in value.items():
        if isinstance(entry, Mapping):
            question = entry.get("question_text") or question_id
            answer = entry.get("answer")
        else:
            question, answer = question_id, entry
        lines.append(f"{question}: {_answer_text(answer)}")
    return "\n".join(lines)


def format_currency(value: Any, html_template: str | None = None) -> Any:
    """Two decimal places; non-numeric input is absent, never ``0.00``."""
    if isinstance(value, bool) or value is None:
        return ABSENT
    if isinstance(value, str):
        value = value.strip().lstrip("£").replace(",", "")
        if not value:
            return ABSENT
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return ABSENT
    if not amount.is_finite():
        return ABSENT
    return f"{amount.quantize(Decimal('0.01')):.2f}"


def format_date(value: Any, html_template: str | None = None) -> Any:
    """ISO date or datetime as ``DD/MM/YYYY``."""
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text).date()
        except ValueError:
            return ABSENT
    else:
        return ABSENT
    return parsed.strftime("%d/%m/%Y")


def format_product_card(value: Any, html_template: str | None = None) -> Any:
    """Render one product record through the rule's card fragment."""
    if not isinstance(value, Mapping) or not html_template:
        return ABSENT
    return render_string(html_template, dict(value))


def format_product_list(value: Any, html_template: str | None = None) -> Any:
    """Render every record of a sequence as a card, concatenated."""
    if isinstance(value, Mapping):
        value = list(value.values())
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return ABSENT
    if not html_template:
        return ABSENT

    cards = []
    for index, item in enumerate(value):
        context = dict(item) if isinstance(item, Mapping) else {"this": item}
        context["@index"] = index
        cards.append(render_string(html_template, context))
    return "".join(cards)


FORMATTERS: dict[Formatter, Callable[[Any, str | None], Any]] = {
    Formatter.RAW: format_raw,
    Formatter.ADDRESS: format_address,
    Formatter.PHONE: format_phone,
    Formatter.QA_LIST: format_qa_list,
    Formatter.CURRENCY: format_currency,
    Formatter.DATE: format_date,
    Formatter.PRODUCT_CARD: format_product_card,
    Formatter.PRODUCT_LIST: format_product_list,
}


def apply_formatter(formatter: str | Formatter | None, value: Any, html_template: str | None = None) -> Any:
    """Apply a named formatter to a resolved value.

    Raises:
        ValueError: If the formatter is not in the catalog
    """
    tag = Formatter(formatter) if formatter else Formatter.RAW
    return FORMATTERS[tag](value, html_template)
