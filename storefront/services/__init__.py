"""Business operations over the record store. Routes stay thin and call these."""
from decimal import Decimal, InvalidOperation

from ..errors import ValidationError


def require_text(value, message: str) -> str:
    """Return the stripped string or raise ValidationError when absent/blank."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def optional_text(value, label: str):
    """Free-text fields are stored as given; empty strings become NULL."""
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be text")
    return value


def parse_id(value, label: str) -> int:
    """Accept an int or a numeric string, as JSON clients send either."""
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError(f"{label} must be an integer")


# Largest magnitude a Numeric(10, 2) column holds
MAX_PRICE = Decimal('1e8')


def parse_price(value, message: str) -> Decimal:
    """Prices are required: non-negative, at most two decimal places, below MAX_PRICE."""
    if value is None or value == '' or isinstance(value, bool):
        raise ValidationError(message)
    try:
        price = Decimal(str(value).strip())
        if not price.is_finite() or price < 0 or price >= MAX_PRICE:
            raise ValidationError(message)
        if price.as_tuple().exponent < -2:
            raise ValidationError(message)
        return price.quantize(Decimal('0.01'))
    except InvalidOperation:
        raise ValidationError(message)
