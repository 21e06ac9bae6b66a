"""
Requirements: custom sender checks run before a command executes.

Subclass Requirement and implement check(sender), or wrap a predicate:

    @requirement("You must be in a party.")
    def in_party(sender):
        return sender.party is not None

An empty message makes the dispatcher fall back to its requirement_failed
template, with %requirement% replaced by the requirement's name (the class
name, or the predicate's name for wrapped functions).
"""
from abc import abstractmethod

from .utils import *


class Requirement(metaclass=IntrospectiveType):
    __introspectable__ = ()
    __displayable__ = ("name", "message")

    message = ""

    @property
    def name(self):
        return type(self).__name__

    @abstractmethod
    def check(self, sender, /):
        """Whether sender satisfies this requirement."""


class PredicateRequirement(Requirement):
    """
    Requirement backed by a plain predicate callable(sender) -> bool.
    """

    def __init__(self, predicate, /, message="", *, name=Unset):
        if not callable(predicate):
            raise TypeError(f"{type(self).__typename__} 'predicate' must be callable")
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__typename__} 'message' must be a string")
        if not isinstance(name := coalesce(name, getattr(predicate, "__name__", type(self).__name__)), str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        self._predicate = predicate
        self._name = name
        self.message = message

    @property
    def name(self):
        return self._name

    def check(self, sender, /):
        return bool(self._predicate(sender))


def requirement(source=Unset, /, *args, **kwargs):
    """
    Create a PredicateRequirement or return a decorator building one.

    Invocation modes
    - Direct: requirement(predicate, "message")
    - Decorator: @requirement("message") or @requirement(name="admin")

    A string first argument is taken as the message (decorator mode).
    """
    if isinstance(source, str):
        source, args = Unset, (source, *args)

    @rename("requirement")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@requirement() must be applied to a callable")
        return PredicateRequirement(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Requirement",
    "PredicateRequirement",
    "requirement",
)
