"""Casting of dynamically typed request values to str, bool and datetime."""

from collections.abc import Mapping
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import orjson

from request_accessor.models.core import RequestValue, thaw_value

TRUE_STRINGS = frozenset(["1", "true", "on", "yes"])

# Host date-format letters and their strptime equivalents.
# Zone-name letters (e, T) have no strptime form; offsets use O, P or p.
DATE_TOKENS: dict[str, str] = {
    "d": "%d",
    "j": "%d",
    "m": "%m",
    "n": "%m",
    "Y": "%Y",
    "y": "%y",
    "H": "%H",
    "G": "%H",
    "h": "%I",
    "g": "%I",
    "i": "%M",
    "s": "%S",
    "A": "%p",
    "a": "%p",
    "D": "%a",
    "l": "%A",
    "M": "%b",
    "F": "%B",
    "u": "%f",
    "v": "%f",
    "O": "%z",
    "P": "%z",
    "p": "%z",
}
RESET_TOKENS = frozenset("!|")


def to_string(value: RequestValue) -> str:
    """Cast a request value to str using the host's scalar rules."""
    match value:
        case None | False:
            return ""
        case True:
            return "1"
        case float() if value.is_integer():
            return str(int(value))
        case list() | tuple() | Mapping():
            return orjson.dumps(thaw_value(value)).decode()
        case _:
            return str(value)


def to_bool(value: RequestValue) -> bool:
    """Permissive boolean: only '1', 'true', 'on' and 'yes' (any case) are true."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple, Mapping)):
        return False
    return to_string(value).strip().lower() in TRUE_STRINGS


def translate_date_format(fmt: str) -> str:
    """Translate a host date format (e.g. 'Y-m-d H:i:s') into a strptime pattern."""
    out: list[str] = []
    chars = iter(fmt)
    for char in chars:
        if char == "\\":
            literal = next(chars, "")
            out.append("%%" if literal == "%" else literal)
        elif char in RESET_TOKENS:
            continue
        elif char == "%":
            out.append("%%")
        else:
            out.append(DATE_TOKENS.get(char, char))
    return "".join(out)


def parse_date(value: RequestValue, fmt: str, timezone: str | None, default_timezone: str) -> datetime:
    """
    Parse value with a host date format.

    Naive results are placed in ``default_timezone``, then converted into
    ``timezone`` when given. Raises ValueError or ZoneInfoNotFoundError.
    """
    text = to_string(value)
    if fmt.strip("!|") == "U":
        parsed = datetime.fromtimestamp(int(text), tz=UTC)
    else:
        parsed = datetime.strptime(text, translate_date_format(fmt))

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(default_timezone))

    if timezone is not None:
        parsed = parsed.astimezone(ZoneInfo(timezone))
    return parsed

