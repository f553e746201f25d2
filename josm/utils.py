from datetime import datetime

from josm.errors import ValidationError, ValidationMissingField


def iso(dt):
    return dt.isoformat() if dt else None


def parse_date(s):
    if not s:
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"invalid date {s!r}, expected YYYY-MM-DD")


def to_int(v, field="quantity"):
    try:
        return int(str(v).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field=field)


def positive_qty(v, field="quantity") -> int:
    if v is None or str(v).strip() == "":
        raise ValidationMissingField(field)
    qty = to_int(v, field)
    if qty <= 0:
        raise ValidationError(f"{field} must be greater than zero", field=field)
    return qty


def clean(v):
    """Strip strings, turning blanks into None."""
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def require(data, *fields):
    values = []
    for f in fields:
        v = clean(data.get(f))
        if v is None:
            raise ValidationMissingField(f)
        values.append(v)
    return values
