"""Token helpers for values read from `TALKIFY_*` variables and YAML files.

Environment variables always arrive as text while YAML may already carry
typed scalars, so each helper accepts both.
"""

from __future__ import annotations


_BOOLEAN_TOKENS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


def normalize_optional_string(value: object) -> str | None:
    """Return `value` as stripped text, or `None` when nothing is left."""

    if value is None:
        return None
    return str(value).strip() or None


def parse_boolean_token(value: object) -> bool | None:
    """Map `true`/`yes`/`on`/`1` and their negatives to a bool.

    Real booleans pass through. Anything else, blank text included, gives
    `None` so callers can decide whether that is an error.
    """

    if isinstance(value, bool):
        return value
    text = normalize_optional_string(value)
    if text is None:
        return None
    return _BOOLEAN_TOKENS.get(text.lower())


def parse_optional_number(value: object, field_name: str) -> int | float | None:
    """Parse an optional numeric value, keeping integers integral.

    Blank strings and `None` map to `None`. Booleans are rejected because
    YAML reads `yes`/`no` as booleans and a range field never wants one.

    Raises:
        ValueError: If the value is present but not numeric.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a number.")
    if isinstance(value, (int, float)):
        return value

    text = normalize_optional_string(value)
    if text is None:
        return None
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            continue
    raise ValueError(f"`{field_name}` must be a number, got `{text}`.")
