"""
Helmsman type conversion: turn raw string tokens into typed values.

Supported targets (closed set, keyed on the declared type)
- str                      → returned unchanged
- bool                     → strict "true"/"false", then flag-presence fallback ("", "1", "yes", "on" ⇒ True; else False)
- enum.Enum subclasses     → case-insensitive member name match
- int                      → optional sign + ASCII digits (surrounding whitespace allowed)
- float, decimal.Decimal   → invariant decimal point ('.'); never depends on the host locale
- T | None / Optional[T]   → unwrapped to T; absence is the caller's business, a bad value still fails

Anything else is a programming error and raises TypeError.
"""
import builtins
import decimal
import enum
import re
import types
import typing
from decimal import Decimal

from .faults import TypeConversionError

TRUTHY = frozenset({"", "1", "yes", "on"})

_INTEGER = re.compile(r"[+-]?[0-9]+")
_REAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:nan|inf|infinity)", re.IGNORECASE)

_NAMES = {
    str: "string",
    int: "int",
    float: "float",
    Decimal: "decimal",
    bool: "bool",
}


def unwrap(type, /):
    """
    Strip a nullable wrapper (T | None, Optional[T]) and return T.

    Unions with more than one non-None member are left untouched (and are
    rejected later as unsupported targets).
    """
    if typing.get_origin(type) in (typing.Union, types.UnionType):
        members = [member for member in typing.get_args(type) if member is not types.NoneType]
        if len(members) == 1:
            return members[0]
    return type


def nullable(type, /):
    """
    True when `type` is a nullable wrapper (T | None, Optional[T]).
    """
    return unwrap(type) is not type


def supports(type, /):
    target = unwrap(type)
    return target in _NAMES or (isinstance(target, builtins.type) and issubclass(target, enum.Enum))


def typename(type, /):
    """
    Short lowercase tag used in help output ("int", "bool", "string", enum class name).
    """
    if type is None:
        return "string"
    target = unwrap(type)
    try:
        return _NAMES[target]
    except KeyError:
        return getattr(target, "__name__", str(target)).lower()


def zero(type, /):
    """
    The zero value of a declared type: False, 0, 0.0, Decimal(0); None for everything else.
    """
    if nullable(type):
        return None
    if type is bool:
        return False
    if type in (int, float, Decimal):
        return type(0)
    return None


def _boolean(raw):
    match raw.strip().casefold():
        case "true":
            return True
        case "false":
            return False
    return raw.casefold() in TRUTHY


def _enumeration(raw, target):
    wanted = raw.strip().casefold()
    for name, member in target.__members__.items():
        if name.casefold() == wanted:
            return member
    raise TypeConversionError(
        "%r is not a valid %s (expected one of: %s)" % (raw, target.__name__, ", ".join(target.__members__)),
        raw=raw,
        type=target,
    )


def convert(raw, type=str, /):
    """
    Convert one raw token into `type`.

    Raises
    - TypeConversionError: the token cannot be parsed as the requested type.
    - TypeError: `raw` is not a string or `type` is outside the supported set.
    """
    if not isinstance(raw, str):
        raise TypeError("convert() first argument must be a string")
    target = unwrap(type)

    if target is str:
        return raw
    if target is bool:
        return _boolean(raw)
    if isinstance(target, builtins.type) and issubclass(target, enum.Enum):
        return _enumeration(raw, target)

    if target is int:
        if not _INTEGER.fullmatch(text := raw.strip()):
            raise TypeConversionError("%r is not a valid int" % raw, raw=raw, type=target)
        return int(text)

    if target in (float, Decimal):
        if not _REAL.fullmatch(text := raw.strip()):
            raise TypeConversionError("%r is not a valid %s" % (raw, typename(target)), raw=raw, type=target)
        try:
            return target(text)
        except (ValueError, decimal.InvalidOperation):
            raise TypeConversionError("%r is not a valid %s" % (raw, typename(target)), raw=raw, type=target) from None

    raise TypeError("convert() cannot produce values of type %r" % (type,))


__all__ = (
    "TRUTHY",
    "unwrap",
    "nullable",
    "supports",
    "typename",
    "zero",
    "convert",
)
