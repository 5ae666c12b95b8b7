from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")
# Stored precision for derived amounts; presentation always rounds to TWO_PLACES
STORAGE_PLACES = Decimal("0.00000001")


def to_decimal(value, field="amount"):
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so floats keep their printed value instead of binary noise
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{field} must be a number, got {value!r}")


def money(value):
    """Round half-up to two places; only for values leaving the system."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_storage(value):
    return to_decimal(value).quantize(STORAGE_PLACES, rounding=ROUND_HALF_UP)


def normalize_amounts(mapping, field="allowances"):
    """
    Turn a name -> amount mapping into name -> decimal string, the form kept
    in JSON columns. Names must be non-empty and amounts non-negative.
    """
    if mapping is None:
        return {}
    if not isinstance(mapping, dict):
        raise ValueError(f"{field} must be a mapping of name to amount")
    normalized = {}
    for name, amount in mapping.items():
        name = str(name).strip()
        if not name:
            raise ValueError(f"{field} names must not be blank")
        amount = to_decimal(amount, f"{field}.{name}")
        if amount < 0:
            raise ValueError(f"{field}.{name} must not be negative")
        normalized[name] = str(amount)
    return normalized


def decimal_map(mapping):
    return {name: to_decimal(amount) for name, amount in (mapping or {}).items()}


def sum_amounts(mapping):
    return sum((to_decimal(amount) for amount in (mapping or {}).values()), Decimal("0"))
