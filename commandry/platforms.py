"""
Host platform surface consumed by the dispatcher.

A Platform tells the engine three things about an opaque sender (permission,
required context, message delivery) and is notified of every label path the
dispatcher mounts or removes, so the host can mirror them natively.

ConsolePlatform is a ready-made adapter for terminal hosts: messages go
through a rich Console, permissions and context are read from the sender.
"""
from abc import ABC, abstractmethod

from rich.console import Console

from .utils import *


class Platform(ABC):
    @abstractmethod
    def has_permission(self, sender, permission, /):
        """Whether sender holds permission (never called with an empty one)."""

    @abstractmethod
    def is_in_required_context(self, sender, /):
        """Whether sender may run game_only commands."""

    @abstractmethod
    def send_message(self, sender, message, /):
        """Deliver a plain-text message to sender."""

    def on_register(self, label, command, /):
        pass

    def on_unregister(self, label, prune, /):
        pass


class ConsolePlatform(Platform):
    """
    Terminal adapter printing through rich.

    Parameters
    - console: rich Console, a new stdout console when Unset.
    - permissions: callable(sender, permission) -> bool; by default the sender's
      `permissions` collection is consulted ("*" grants everything).
    - context: callable(sender) -> bool; by default the sender's `in_context`
      attribute, True when missing.
    """

    def __init__(self, console=Unset, /, *, permissions=Unset, context=Unset):
        if console is Unset:
            console = Console(highlight=False)
        elif not isinstance(console, Console):
            raise TypeError("console-platform 'console' must be a rich console")
        for name, object in (("permissions", permissions), ("context", context)):
            if object is not Unset and not callable(object):
                raise TypeError(f"console-platform {name!r} must be callable")
        self._console = console
        self._permissions = permissions
        self._context = context

    @property
    def console(self):
        return self._console

    def has_permission(self, sender, permission, /):
        if self._permissions is not Unset:
            return bool(self._permissions(sender, permission))
        granted = getattr(sender, "permissions", ())
        return permission in granted or "*" in granted

    def is_in_required_context(self, sender, /):
        if self._context is not Unset:
            return bool(self._context(sender))
        return bool(getattr(sender, "in_context", True))

    def send_message(self, sender, message, /):
        self._console.print(message, markup=False, highlight=False)


__all__ = (
    "Platform",
    "ConsolePlatform",
)
