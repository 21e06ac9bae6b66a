r"""
Commandry argument specifications.

Overview
- Kinds (tagged union, match-friendly)
  • Simple(key): a single token converted by the converter registered under key.
  • Infinite(): consumes every remaining token as one space-joined string.
  Both support structural pattern matching:

      match argument.type:
          case Simple(key): ...
          case Infinite(): ...

- kind(object): normalizes a type description into a kind:
  • "int" / " INT " -> Simple("int")
  • int, str, MyEnum -> Simple(<lowercased class name>)
  • "infinite", Infinite, Infinite() -> Infinite()

- Argument(name, type, completer=Unset)
  • name: label-shaped identifier used as lookup key in parsed arguments.
  • type: any value accepted by kind().
  • completer: optional callable(TabContext) -> Iterable[str]; takes precedence
    over the completer of the type's converter.
  • canonical_name: "name:key" (e.g. "target:str", "message:infinite").

- TabContext(sender, label, arguments): what completers receive; arguments are
  the tokens typed after the command path.

Validation highlights
- Names must match r"[A-Za-z][A-Za-z0-9_]*" (same shape as label segments).
- Simple keys are trimmed and lowercased; "infinite" is reserved.
"""
import functools
import re
from collections import namedtuple
from typing import final

from .utils import *

_NAME = re.compile(r"[A-Za-z][A-Za-z0-9_]*")

INFINITE = "infinite"


class Simple(metaclass=IntrospectiveType):
    """
    Single-token argument kind, converted through the registry entry for key.
    """
    __introspectable__ = ("key",)
    __match_args__ = ("key",)

    def __init__(self, key, /):
        if not isinstance(key, str):
            raise TypeError(f"{type(self).__typename__} 'key' must be a string")
        elif not (key := key.strip().lower()):
            raise ValueError(f"{type(self).__typename__} 'key' cannot be empty")
        elif key == INFINITE:
            raise ValueError(f"{type(self).__typename__} 'key' {INFINITE!r} is reserved")
        self._key = key

    def __eq__(self, other):
        if not isinstance(other, Simple):
            return NotImplemented
        return self._key == other._key

    def __hash__(self):
        return hash((Simple, self._key))


@final
class Infinite(metaclass=IntrospectiveType):
    """
    Greedy argument kind: the rest of the input, joined with single spaces.
    """
    __introspectable__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    @property
    def key(self):
        return INFINITE


def kind(object, /):
    """
    Normalize a type description into a Simple or Infinite kind.

    Accepted
    - Simple / Infinite instances (returned as-is).
    - The Infinite class itself.
    - A string key ("infinite" maps to Infinite()).
    - Any other class (key is its lowercased __name__).
    """
    match object:
        case Simple() | Infinite():
            return object
        case type() if object is Infinite:
            return Infinite()
        case type():
            return Simple(object.__name__)
        case str() if object.strip().lower() == INFINITE:
            return Infinite()
        case str():
            return Simple(object)
        case _:
            raise TypeError("kind() argument must be a string, a type or an argument kind")


class Argument(metaclass=IntrospectiveType):
    """
    Named, positional argument specification.

    Arguments are immutable once built; a command keeps them in declaration
    order in two lists (required, then optional).
    """
    __introspectable__ = ("name", "type", "completer")

    def __init__(self, name, type, /, completer=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{self.__class__.__typename__} 'name' must be a string")
        elif not _NAME.fullmatch(name := name.strip()):
            raise ValueError(f"{self.__class__.__typename__} 'name' {name!r} must match {_NAME.pattern!r}")
        if completer is not Unset and completer is not None and not callable(completer):
            raise TypeError(f"{self.__class__.__typename__} 'completer' must be callable")
        self._name = name
        self._type = kind(type)
        self._completer = coalesce(completer)

    @property
    def infinite(self):
        return isinstance(self._type, Infinite)

    @property
    def canonical_name(self):
        return f"{self._name}:{self._type.key}"


TabContext = namedtuple("TabContext", (
    "sender",
    "label",
    "arguments",
))
TabContext.__doc__ = """
Completion context: the sender asking, the full label of the resolved
command, and the tokens typed after it (the last one possibly partial).
"""


__all__ = (
    "Simple",
    "Infinite",
    "kind",
    "Argument",
    "TabContext",
)
