"""
Commandry command model: what a command is, independent of where it is mounted.

What this module provides
- Command: aggregate of
  • identity: name, aliases (name excluded), description, usage;
  • access: permission (empty = public), game_only, requirements;
  • arguments: required and optional specs, at most one infinite spec and
    only in last position;
  • composition: subcommands, mounted under every label of their parent;
  • behavior: a handler(sender, arguments) callable, or an execute() override.

- command(...): create a Command or a decorator that produces one.

Quick start
    from commandry import command, Dispatcher

    @command(arguments=[("target", str)], optional_arguments=[("reason", "infinite")])
    def kick(sender, arguments):
        ...

    @kick.command(permission="kick.silent")
    def silent(sender, arguments):
        ...

    dispatcher.register_command(kick)   # /kick <target:str> [reason:infinite]

Lifecycle
- Everything except `enabled` is expected to be settled before the command is
  handed to a dispatcher. A Command never knows its tree position: the same
  object is attached once per label and per parent path.
"""
import inspect
import itertools
import math
from collections.abc import Iterable

from .arguments import Argument
from .faults import InfiniteArgumentError, DuplicateArgumentError, DuplicateLabelError, InvalidLabelError
from .requirements import Requirement
from .tree import CommandTree
from .utils import *


def _process_label(cls, label, field):
    """
    Validate a single label segment (command name or alias).
    """
    if not isinstance(label, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif "." in (label := label.strip()):
        raise InvalidLabelError(f"{cls.__typename__} {field!r} {label!r} must be a single segment")
    CommandTree.validate(label)
    return label


def _process_strings(cls, metadata):
    """
    Normalize scalar string metadata: trimmed, Unset becomes "".
    """
    for name in ("description", "usage", "permission"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        metadata[name] = coalesce(object, "").strip()


def _process_flags(cls, metadata):
    for name in ("game_only", "enabled"):
        if not isinstance(metadata[name], bool):
            raise TypeError(f"{cls.__typename__} {name!r} must be a boolean")


def _resolve_argument(cls, object):
    """
    Accept an Argument or a (name, type[, completer]) tuple.
    """
    if isinstance(object, Argument):
        return object
    if isinstance(object, tuple) and 2 <= len(object) <= 3:
        return Argument(*object)
    raise TypeError(f"{cls.__typename__} arguments must be arguments or (name, type[, completer]) tuples")


class Command(metaclass=IntrospectiveType):
    """
    Executable command definition.

    Parameters
    - handler: callable(sender, arguments), or Unset when a subclass
      overrides execute().
    - name: str | Unset (defaults to handler.__name__).
    - aliases: Iterable[str], alternative labels.
    - description: str | Unset (defaults to the handler's docstring).
    - usage: str | Unset; empty means a usage line is generated.
    - permission: str | Unset; empty means everyone may run it.
    - game_only: bool, restrict to senders in the host's required context.
    - enabled: bool, the one field meant to change after registration.
    - arguments / optional_arguments: Iterable[Argument | tuple].
    - subcommands: Iterable[Command].
    - requirements: Iterable[Requirement].

    Raises
    - TypeError/ValueError on invalid shapes, InvalidLabelError on bad names,
      InfiniteArgumentError when a spec follows an infinite one.
    """
    __introspectable__ = (
        "name",
        "aliases",
        "description",
        "usage",
        "permission",
        "game_only",
        "arguments",
        "optional_arguments",
        "subcommands",
        "requirements",
    )

    __displayable__ = (
        "name",
        "aliases",
        "permission",
        "arguments",
        "optional_arguments",
        "subcommands",
    )

    def __init__(
            self,
            handler=Unset,
            /,
            name=Unset,
            *,
            aliases=(),
            description=Unset,
            usage=Unset,
            permission=Unset,
            game_only=False,
            enabled=True,
            arguments=(),
            optional_arguments=(),
            subcommands=(),
            requirements=(),
    ):
        cls = type(self)
        if handler is not Unset and not callable(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must be callable")
        if handler is Unset and type(self).execute is Command.execute:
            raise TypeError(f"{cls.__typename__} requires a handler or an execute() override")
        if name is Unset and handler is Unset:
            raise TypeError(f"{cls.__typename__} 'name' must be provided without a handler")

        metadata = {
            "description": coalesce(description, inspect.getdoc(handler) if handler is not Unset else None) or Unset,
            "usage": usage,
            "permission": permission,
            "game_only": game_only,
            "enabled": enabled,
        }
        _process_strings(cls, metadata)
        _process_flags(cls, metadata)

        self._handler = handler
        self._name = _process_label(cls, coalesce(name, getattr(handler, "__name__", Unset)), "name")
        self._aliases = []
        self._arguments = []
        self._optional_arguments = []
        self._subcommands = []
        self._requirements = []
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        for field, object in (
                ("aliases", aliases),
                ("arguments", arguments),
                ("optional_arguments", optional_arguments),
                ("subcommands", subcommands),
                ("requirements", requirements),
        ):
            if isinstance(object, str) or not isinstance(object, Iterable):
                raise TypeError(f"{cls.__typename__} {field!r} must be an iterable")

        self.add_alias(*aliases)
        for argument in arguments:
            self.add_argument(argument)
        for argument in optional_arguments:
            self.add_optional_argument(argument)
        self.add_subcommand(*subcommands)
        self.add_requirement(*requirements)

    @property
    def enabled(self):
        return self._enabled

    @enabled.setter
    def enabled(self, value):
        if not isinstance(value, bool):
            raise TypeError(f"{type(self).__typename__} 'enabled' must be a boolean")
        self._enabled = value

    @property
    def handler(self):
        return coalesce(self._handler)

    @property
    def infinite(self):
        return any(argument.infinite for argument in itertools.chain(self._arguments, self._optional_arguments))

    @property
    def arity(self):
        """
        (minimum, maximum) accepted token counts; maximum is math.inf for
        commands with an infinite argument.
        """
        minimum = len(self._arguments)
        return minimum, math.inf if self.infinite else minimum + len(self._optional_arguments)

    def all_labels(self):
        return [self._name, *self._aliases]

    def add_alias(self, *aliases):
        for alias in aliases:
            alias = _process_label(type(self), alias, "alias")
            if alias.lower() in map(str.lower, self.all_labels()):
                raise DuplicateLabelError(f"{type(self).__typename__} label {alias!r} is already in use")
            self._aliases.append(alias)
        return self

    def _attach_argument(self, argument, registry, field):
        argument = _resolve_argument(type(self), argument)
        if self.infinite:
            raise InfiniteArgumentError(
                f"{type(self).__typename__} {field} {argument.name!r} cannot follow an infinite argument"
            )
        if any(argument.name == other.name for other in itertools.chain(self._arguments, self._optional_arguments)):
            raise DuplicateArgumentError(f"{type(self).__typename__} argument name {argument.name!r} is already in use")
        registry.append(argument)
        return self

    def add_argument(self, argument, /, *args, **kwargs):
        """
        Append a required argument: add_argument(Argument(...)) or
        add_argument("name", type, completer=...).
        """
        if isinstance(argument, str):
            argument = Argument(argument, *args, **kwargs)
        return self._attach_argument(argument, self._arguments, "argument")

    def add_optional_argument(self, argument, /, *args, **kwargs):
        if isinstance(argument, str):
            argument = Argument(argument, *args, **kwargs)
        return self._attach_argument(argument, self._optional_arguments, "optional argument")

    def add_subcommand(self, *commands):
        for command in commands:
            if not isinstance(command, Command):
                raise TypeError(f"{type(self).__typename__} subcommands must be commands")
            if command is self:
                raise ValueError(f"{type(self).__typename__} cannot be its own subcommand")
            taken = {label.lower() for subcommand in self._subcommands for label in subcommand.all_labels()}
            if taken.intersection(map(str.lower, command.all_labels())):
                typeof = type(self).__typename__
                raise DuplicateLabelError(f"{typeof} subcommand name {command.name!r} is already in use")
            self._subcommands.append(command)
        return self

    def add_requirement(self, *requirements):
        for requirement in requirements:
            if not isinstance(requirement, Requirement):
                raise TypeError(f"{type(self).__typename__} requirements must be requirements")
            self._requirements.append(requirement)
        return self

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create a subcommand and attach it under this command.

        Same invocation modes as command(...): direct (`cmd.command(func, ...)`)
        or decorator (`@cmd.command(...)`). Returns the new subcommand.
        """
        @rename("command")
        def wrapper(source, /):
            self.add_subcommand(subcommand := command(source, *args, **kwargs))
            return subcommand

        return wrapper(source) if source is not Unset else wrapper

    def usage_for(self, label, /, visible=Unset):
        """
        Generate the default usage line for this command mounted at label.

        Grammar
            "/" + label segments joined with spaces
            + " <sub1|sub2>"       when visible subcommands exist
            + "|" or " "           before arguments ("|" only after subcommands)
            + "<name:type> ..."    required arguments
            + " [name:type] ..."   optional arguments

        visible(subcommand) -> bool filters the listed subcommands (by default,
        every subcommand is listed).
        """
        visible = coalesce(visible, lambda command: True)
        usage = "/" + " ".join(label.split("."))
        if subcommands := [subcommand.name for subcommand in self._subcommands if visible(subcommand)]:
            usage += " <" + "|".join(subcommands) + ">"
        if self._arguments or self._optional_arguments:
            usage += "|" if subcommands else " "
            usage += " ".join(itertools.chain(
                (f"<{argument.canonical_name}>" for argument in self._arguments),
                (f"[{argument.canonical_name}]" for argument in self._optional_arguments),
            ))
        return usage

    def execute(self, sender, arguments, /):
        """
        Run the command. The default implementation calls the handler.
        """
        return self._handler(sender, arguments)

    def __call__(self, sender, arguments, /):
        return self.execute(sender, arguments)


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        cmd = command(func, name="x", ...)
    - Decorator:
        @command(name="x", aliases=["y"], ...)
        def func(sender, arguments): ...

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command (name, aliases, permission, ...).
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source) or isinstance(source, Command):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "command",
)
