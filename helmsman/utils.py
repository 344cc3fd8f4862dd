"""
Helmsman utilities (internal helpers shared by every layer).

Overview
- UnsetType / Unset
  • Singleton sentinel for "not provided", distinct from None (None is a valid default value).
- coalesce(value, default=None)
  • Materialize Unset into a concrete default while preserving None/0/""/[].
- rename(callable, name) / @rename("name")
  • Give generated closures (pipeline steps, wrappers) stable names for tracebacks.
- mirror("attr")
  • Read-only property over a private backing field, handing out copies of containers.
- fold(text) / same(left, right)
  • Case-insensitive keys and comparisons used for command, alias and option lookups.

Names not listed in __all__ are internal and may change without notice.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Falsy, but not equal to None, 0 or "".
    - repr(Unset) == "Unset".
    - Singleton per process and not subclassable.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, otherwise `object` unchanged.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator doing so.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Shallow-copy containers so callers cannot mutate the backing field.

    Sequences (other than strings) become tuples, mappings become dicts, sets become frozensets.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    elif isinstance(object, Mapping):
        return dict(object)
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property reading the backing field "_{name}".

    Containers are returned as detached copies (see _detach).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


def fold(text, /):
    """
    Normalize a lookup key for case-insensitive matching (None passes through).
    """
    return text.casefold() if isinstance(text, str) else text


def same(left, right, /):
    """
    Case-insensitive equality where None and "" are both "no value".
    """
    return fold(left or None) == fold(right or None)


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Use it as a parameter default when None is a meaningful user value and
materialize it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "fold",
    "same",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
