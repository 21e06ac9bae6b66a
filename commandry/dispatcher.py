"""
Commandry dispatcher: registration, invocation and suggestions.

What this module provides
- Dispatcher: owns one command tree, one converter registry, the completers,
  the argument parser and the message templates, and drives a Platform.

Invocation pipeline (invoke)
1. tree lookup                   no command            -> False
2. enabled                       disabled              -> "disabled"
3. game_only                     sender out of context -> "only_in_context"
4. permission                    sender lacks it       -> "no_permission"
5. requirements, in order        first failure         -> its message or "requirement_failed"
6. arity                         too few / too many    -> explicit or generated usage
7. parse                         TYPE_NOT_FOUND        -> logged, "internal_error", False
                                 CONVERSION_FAILED     -> "arg_not_recognized"
                                 ARGUMENT_TOO_LONG     -> "argument_too_long"
                                 INVALID_FORMAT        -> "invalid_format"
8. execute                       handler errors propagate to the caller
Every stage that sends a message returns True ("handled").

Completion (suggest)
- Completers live in an ordered list per (full label, position); later
  registrations at the same slot append. Position p is the p-th token after
  the command path: the children of a node answer at position 1, argument i
  (required then optional, 0-based) at position i + 1.

Threading
- No internal locking. Register everything before dispatching concurrently;
  concurrent invoke/suggest on a stable tree is safe.
"""
import itertools
import logging
from collections import defaultdict

from .arguments import Simple, Infinite, TabContext
from .commands import Command
from .converters import ConverterRegistry
from .faults import *
from .messages import Messages
from .parsing import ArgumentParser, MAX_INFINITE_LENGTH
from .platforms import Platform
from .tree import CommandTree, MAX_DEPTH
from .utils import *

logger = logging.getLogger(__name__)


def _matches(candidate, current):
    """Case-insensitive equality or prefix match of a candidate on the typed token."""
    return candidate.lower() == (current := current.lower()) or candidate.lower().startswith(current)


class Dispatcher:
    """
    Entry point for hosts: register commands, then feed it invocations.

    Parameters
    - platform: Platform implementation for the host.
    - messages: Messages | Unset (defaults merged with __main__.__messages__).
    - limit: maximum length of an infinite argument value.
    - debug: log registrations and removals at INFO level.
    - builtins: register the built-in converters (str, int, float, bool).
    """

    def __init__(self, platform, /, *, messages=Unset, limit=MAX_INFINITE_LENGTH, debug=False, builtins=True):
        if not isinstance(platform, Platform):
            raise TypeError("dispatcher 'platform' must be a platform")
        if messages is Unset:
            messages = Messages()
        elif not isinstance(messages, Messages):
            raise TypeError("dispatcher 'messages' must be messages")
        if not isinstance(debug, bool):
            raise TypeError("dispatcher 'debug' must be a boolean")
        self._platform = platform
        self._messages = messages
        self._debug = debug
        self._tree = CommandTree()
        self._converters = ConverterRegistry(builtins=builtins)
        self._parser = ArgumentParser(self._converters, limit)
        self._completers = defaultdict(lambda: defaultdict(list))

    @property
    def platform(self):
        return self._platform

    @property
    def tree(self):
        return self._tree

    @property
    def converters(self):
        return self._converters

    @property
    def messages(self):
        return self._messages

    @property
    def debug(self):
        return self._debug

    @debug.setter
    def debug(self, value):
        if not isinstance(value, bool):
            raise TypeError("dispatcher 'debug' must be a boolean")
        self._debug = value

    def completers(self, label, position, /):
        """
        Completers registered for (label, position), in registration order.
        """
        return list(self._completers.get(label.lower(), {}).get(position, ()))

    def commands(self):
        """
        Every mounted path mapped to its command, parents before children.
        """
        return {node.full_label: node.command for node in self._tree.walk() if node.command is not None}

    # ── registration ─────────────────────────────────────────────────────────

    def register_converter(self, key, converter, /, completer=Unset):
        self._converters.register(key, converter, completer)

    def _expand(self, command, parent=None, ancestors=()):
        if any(command is ancestor for ancestor in ancestors):
            raise CommandRegistrationError(f"command {command.name!r} is a subcommand of itself")
        ancestors = (*ancestors, command)
        for label in command.all_labels():
            yield (path := label if parent is None else f"{parent}.{label}"), command
            if path.count(".") < MAX_DEPTH:
                for subcommand in command.subcommands:
                    yield from self._expand(subcommand, path, ancestors)

    def _validate(self, label, command):
        self._tree.validate(label)
        for argument in itertools.chain(command.arguments, command.optional_arguments):
            match argument.type:
                case Simple(key) if key not in self._converters:
                    raise UnknownTypeError(
                        f"argument {argument.name!r} of {label!r} has unknown type {key!r}"
                    )
                case Simple() | Infinite():
                    pass

    def register_command(self, command, /):
        """
        Mount command under each of its labels, and its subcommands under
        each "parent.label" path, recursively.

        The whole batch is validated first: on CommandRegistrationError nothing
        has been mounted.
        """
        if not isinstance(command, Command):
            raise TypeError("register_command() argument must be a command")

        entries = list(self._expand(command))
        try:
            for label, target in entries:
                self._validate(label, target)
        except (InvalidLabelError, UnknownTypeError) as error:
            raise CommandRegistrationError(f"unable to register command {command.name!r}: {error}") from error

        for label, target in entries:
            self._add(label, target)

    def _add(self, label, command):
        if (node := self._tree.find_exact(label)) is not None and node.command is command:
            return
        if self._debug:
            logger.info("register command %s", label)
        node = self._tree.register(label, command)
        self._platform.on_register(node.full_label, command)

        completers = self._completers[node.full_label]
        for position, argument in enumerate(itertools.chain(command.arguments, command.optional_arguments), 1):
            match argument.type:
                case Simple(key):
                    completer = argument.completer or self._converters.completer(key)
                case Infinite():
                    completer = argument.completer
            if completer is not None:
                completers[position].append(completer)

    def unregister_command(self, label, /, prune=True):
        """
        Remove a mounted command under every one of its labels.

        Parameters
        - label: dotted path of a mounted command, or a Command mounted at the
          root.
        - prune: also remove its subcommands (the whole subtree); otherwise
          only the command itself is detached and subcommands stay reachable.

        Raises
        - UnknownCommandError: nothing is mounted at label.
        """
        if isinstance(label, Command):
            command, parent = label, None
            if (node := self._tree.find_exact(command.name)) is None or node.command is not command:
                raise UnknownCommandError(f"command {command.name!r} is not registered")
        elif isinstance(label, str):
            if (node := self._tree.find_exact(label)) is None or node.command is None:
                raise UnknownCommandError(f"command with label {label!r} does not exist")
            command, parent = node.command, label.rpartition(".")[0].lower() or None
        else:
            raise TypeError("unregister_command() argument must be a label or a command")

        for alias in command.all_labels():
            path = alias if parent is None else f"{parent}.{alias}"
            if (node := self._tree.find_exact(path)) is None or node.command is not command:
                continue
            self._remove(path.lower(), prune)

    def _remove(self, label, prune):
        if self._debug:
            logger.info("unregister command %s", label)
        self._platform.on_unregister(label, prune)
        self._tree.remove(label, prune)
        self._completers.pop(label, None)
        if prune:
            for key in [key for key in self._completers if key.startswith(label + ".")]:
                del self._completers[key]

    # ── invocation ──────────────────────────────────────────────────────────

    def _permits(self, sender, command):
        if command.permission and not self._platform.has_permission(sender, command.permission):
            return False
        return all(requirement.check(sender) for requirement in command.requirements)

    def _send(self, sender, key, /, **tokens):
        self._platform.send_message(sender, self._messages.format(key, **tokens))

    def usage(self, sender, label, command, /):
        """
        The command's explicit usage, or the generated one listing only the
        subcommands sender has permission for.
        """
        return command.usage or command.usage_for(label, lambda subcommand: (
            not subcommand.permission or self._platform.has_permission(sender, subcommand.permission)
        ))

    def parse(self, command, tokens, /):
        return self._parser.parse(command, tokens)

    def invoke(self, sender, label, arguments=(), /):
        """
        Dispatch an invocation. Returns False only when no command matches.
        """
        if (match := self._tree.find(label, arguments)) is None or (command := match.node.command) is None:
            return False
        node, leftover = match

        if not command.enabled:
            self._send(sender, "disabled")
            return True

        if command.game_only and not self._platform.is_in_required_context(sender):
            self._send(sender, "only_in_context")
            return True

        if command.permission and not self._platform.has_permission(sender, command.permission):
            self._send(sender, "no_permission")
            return True

        for requirement in command.requirements:
            if not requirement.check(sender):
                self._platform.send_message(sender, requirement.message or self._messages.format(
                    "requirement_failed", requirement=requirement.name
                ))
                return True

        minimum, maximum = command.arity
        if not minimum <= len(leftover) <= maximum:
            self._platform.send_message(sender, self.usage(sender, node.full_label, command))
            return True

        if not (result := self._parser.parse(command, leftover)):
            error = result.error
            match error.kind:
                case FaultCode.TYPE_NOT_FOUND:
                    logger.error("command %s: %s", node.full_label, error.message)
                    self._send(sender, "internal_error")
                    return False
                case FaultCode.CONVERSION_FAILED:
                    self._send(sender, "arg_not_recognized", arg=error.input)
                case FaultCode.ARGUMENT_TOO_LONG:
                    self._send(sender, "argument_too_long", arg=error.argument, max=self._parser.limit)
                case FaultCode.INVALID_FORMAT:
                    self._send(sender, "invalid_format", arg=error.input)
                case FaultCode.MISSING_REQUIRED:
                    self._platform.send_message(sender, self.usage(sender, node.full_label, command))
            return True

        command.execute(sender, result.arguments)
        return True

    # ── suggestions ─────────────────────────────────────────────────────────

    def _children(self, sender, node):
        return [
            label for label, child in node.children.items()
            if child.command is None or self._permits(sender, child.command)
        ]

    def suggest(self, sender, label, arguments=(), /):
        """
        Completion candidates for the last token of an invocation.
        """
        arguments = tuple(arguments)
        if (match := self._tree.find(label, arguments)) is not None and match.node.command is not None:
            node, leftover = match
            if leftover and (completers := self.completers(node.full_label, position := len(leftover))):
                context = TabContext(sender, node.full_label, leftover)
                candidates = []
                for completer in completers:
                    candidates.extend(completer(context))
                if position == 1:
                    candidates.extend(self._children(sender, node))
                return list(dict.fromkeys(
                    candidate for candidate in candidates
                    if _matches(candidate, arguments[-1]) and self._allowed(sender, node, candidate)
                ))
        return self._fallback(sender, label, arguments)

    def _allowed(self, sender, node, candidate):
        if (child := node.children.get(candidate.lower())) is None or child.command is None:
            return True
        return self._permits(sender, child.command)

    def _fallback(self, sender, label, arguments):
        if (node := self._tree.root.children.get(label.lower())) is None:
            return []
        *typed, current = arguments or ("",)
        for token in typed:
            if (node := node.children.get(token.lower())) is None:
                return []
        labels = self._children(sender, node)
        if any(_matches(child, current) for child in labels):
            return [child for child in labels if _matches(child, current)]
        return labels


__all__ = (
    "Dispatcher",
)
