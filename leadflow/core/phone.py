"""Phone number utilities for consistent handling across the application."""

import logging
import re

logger = logging.getLogger(__name__)


def format_phone_international(phone: str | None, country_code: str = "44") -> str | None:
    """Rewrite a national phone number into its country-coded form.

    The deployment serves a single country, so only one calling code is known:
        07123 456 789   → +447123456789
        447123456789    → +447123456789
        +44 7123 456789 → +447123456789
        555-1234        → 555-1234 (unchanged)

    Args:
        phone: Phone number in any format
        country_code: Calling code without the leading '+'

    Returns:
        Country-coded phone, the original input when no rule applies,
        or None for empty input
    """
    if not phone:
        return None

    digits = re.sub(r'\D', '', phone)

    if digits.startswith('0'):
        return f"+{country_code}{digits[1:]}"
    if digits.startswith(country_code):
        return f"+{digits}"

    logger.debug(f"Phone number left unchanged: {phone}")
    return phone
