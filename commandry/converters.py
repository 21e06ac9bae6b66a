"""
Type converter registry and built-in converters.

A converter is any callable `token -> value | None`. Returning None means the
token could not be converted (reported as a conversion failure); raising
ValueError/TypeError means the token is malformed for the type (reported as
an invalid format). A converter may also expose `__complete__(context)` to
offer default completions for every argument of its type.

Built-ins (registered by default on every registry)
- "str"   → StringConverter: the token unchanged.
- "int"   → IntegerConverter: optional sign and decimal digits only.
- "float" → FloatConverter: anything float() accepts.
- "bool"  → BooleanConverter: "true"/"false" (case-insensitive), completes both.

EnumConverter(enum) maps member names (case-insensitive) and completes them.
"""
import re
from abc import ABC, abstractmethod

from .arguments import Infinite, kind
from .faults import UnknownTypeError
from .utils import *


class Converter(ABC):
    """Base for class-based converters."""

    @abstractmethod
    def __call__(self, token, /): ...


class StringConverter(Converter):
    def __call__(self, token, /):
        return token


class IntegerConverter(Converter):
    _PATTERN = re.compile(r"[+-]?[0-9]+")

    def __call__(self, token, /):
        if not self._PATTERN.fullmatch(token):
            return None
        return int(token)


class FloatConverter(Converter):
    def __call__(self, token, /):
        try:
            return float(token)
        except ValueError:
            return None


class BooleanConverter(Converter):
    def __call__(self, token, /):
        match token.lower():
            case "true":
                return True
            case "false":
                return False
            case _:
                return None

    def __complete__(self, context, /):
        return ["true", "false"]


class EnumConverter(Converter):
    """
    Convert a token to a member of the given Enum by name, ignoring case.
    """

    def __init__(self, enum, /):
        if not isinstance(enum, type) or not hasattr(enum, "__members__"):
            raise TypeError("enum-converter 'enum' must be an enum class")
        self._enum = enum
        self._members = {name.lower(): member for name, member in enum.__members__.items()}

    @property
    def enum(self):
        return self._enum

    def __call__(self, token, /):
        return self._members.get(token.lower())

    def __complete__(self, context, /):
        return list(self._members)


class ConverterRegistry:
    """
    Map of type key -> (converter, default completer), owned by one dispatcher.

    Keys are normalized through kind(): `register(int, ...)` and
    `register("INT", ...)` address the same entry. Registering a key again
    replaces the previous entry.
    """

    def __init__(self, *, builtins=True):
        self._converters = {}
        self._completers = {}
        if builtins:
            self.register("str", StringConverter())
            self.register("int", IntegerConverter())
            self.register("float", FloatConverter())
            self.register("bool", BooleanConverter())

    def register(self, key, converter, /, completer=Unset):
        """
        Register converter under key.

        Parameters
        - key: anything kind() accepts except the infinite kind.
        - converter: callable(token) -> value | None.
        - completer: callable(TabContext) -> Iterable[str], None to disable,
          or Unset to use `converter.__complete__` when it exists.
        """
        if isinstance(key := kind(key), Infinite):
            raise ValueError("register() key 'infinite' is reserved")
        if not callable(converter):
            raise TypeError("register() converter must be callable")
        if completer is Unset:
            completer = getattr(converter, "__complete__", None)
        elif completer is not None and not callable(completer):
            raise TypeError("register() completer must be callable")
        self._converters[key.key] = converter
        self._completers[key.key] = completer

    def convert(self, key, token, /):
        try:
            converter = self._converters[kind(key).key]
        except KeyError:
            raise UnknownTypeError(f"unknown argument type {kind(key).key!r}") from None
        return converter(token)

    def completer(self, key, /):
        """
        Return the default completer for key, or None when it has none.
        """
        return self._completers.get(kind(key).key)

    def keys(self):
        return tuple(self._converters)

    def __contains__(self, key):
        try:
            return kind(key).key in self._converters
        except (TypeError, ValueError):
            return False

    def __len__(self):
        return len(self._converters)

    def __repr__(self):
        return f"converter-registry({", ".join(map(repr, self._converters))})"


__all__ = (
    "Converter",
    "StringConverter",
    "IntegerConverter",
    "FloatConverter",
    "BooleanConverter",
    "EnumConverter",
    "ConverterRegistry",
)
