"""
Shared helpers for the model layers (arguments, commands, requirements,
parsing results).

- Unset: "not provided" marker, distinct from None. A completer passed as
  None means "no completion", while Unset means "use the default".
- coalesce(value, default): resolve Unset, keep every other value.
- rename("name"): decorator fixing __name__/__qualname__ of generated
  wrappers so tracebacks and reprs stay readable.
- mirror("field"): read-only property over self._field, returning copies of
  containers.
- IntrospectiveType: metaclass wiring the three conventions every model
  class follows (a hyphenated __typename__ used in error messages, mirrored
  fields from __introspectable__, reprs from __displayable__).

    >>> class Point(metaclass=IntrospectiveType):
    ...     __introspectable__ = ("x",)
    ...     def __init__(self, x):
    ...         self._x = x
    >>> Point(1)
    point(x=1)
"""
import functools
import re
from abc import ABCMeta
from collections.abc import Sequence, Mapping, Set
from typing import final

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


@final
class UnsetType:
    """
    Type of the Unset singleton. Falsey, prints as "Unset", cannot be
    subclassed, and takes part in `X | Unset` unions for isinstance checks.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("unset-type cannot be subclassed")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return default when object is Unset, object otherwise (None, 0 and ""
    included).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator giving a generated callable a stable __name__/__qualname__.

        @rename("command")
        def wrapper(source, /): ...
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        try:
            function.__name__ = function.__qualname__ = name
        except (AttributeError, TypeError):
            raise TypeError(f"@rename() cannot rename {function!r}") from None
        return function

    return decorator


def _snapshot(object):
    match object:
        case str():
            return object
        case Mapping():
            return {key: _snapshot(value) for key, value in object.items()}
        case Set():
            return {_snapshot(value) for value in object}
        case Sequence():
            return [_snapshot(value) for value in object]
        case _:
            return object


def mirror(field, /):
    """
    Read-only property for self._<field>. Container values come back as
    fresh lists/dicts/sets, so `command.arguments.append(...)` never reaches
    the registered state.
    """
    if not isinstance(field, str):
        raise TypeError("mirror() argument must be a string")

    @rename(field)
    def getter(self):
        return _snapshot(getattr(self, f"_{field}"))

    return property(getter)


def _rich_repr(self):
    fields = type(self).__displayable__
    for field in type(self).__introspectable__ if fields is Unset else fields:
        yield field, getattr(self, field)


def _repr(self):
    return f"{type(self).__typename__}({", ".join(f"{field}={value!r}" for field, value in self.__rich_repr__())})"


class IntrospectiveType(ABCMeta):
    """
    Metaclass of the package's model objects.

    A class gets:
    - __typename__: its name split on capitals, hyphenated and lowercased
      (ParseResult -> "parse-result");
    - one mirror() property per name in its own __introspectable__, unless
      the class body already defines that name;
    - __rich_repr__ over __displayable__ (or __introspectable__ when unset),
      and a matching __repr__ unless the class body defines one.

    Being an ABCMeta, it also refuses to instantiate classes that leave an
    @abstractmethod unimplemented.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        namespace["__typename__"] = _CAMEL.sub("-", name).lower()
        for field in namespace.get("__introspectable__", ()):
            namespace.setdefault(field, mirror(field))
        self = super().__new__(cls, name, bases, namespace)
        if "__repr__" not in namespace:
            self.__repr__ = _repr
        self.__rich_repr__ = _rich_repr
        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",
    "IntrospectiveType",

    # Constants
    "Unset",
)
