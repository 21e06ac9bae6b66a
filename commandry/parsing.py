"""
Positional argument parsing.

ArgumentParser.parse(command, tokens) walks the command's required specs, then
its optional specs, consuming one token per Simple spec. An Infinite spec takes
every remaining token joined with single spaces and ends parsing. A required
Infinite spec with nothing left gets an empty string; an optional one stays
unset, like any other optional spec. The joined value is bounded by the parser limit
(10,000 characters by default); a longer value is an error, never truncated.

The outcome is a ParseResult: either typed Arguments plus the number of tokens
consumed, or a ParseError whose kind is one of the parsing fault codes:

    MISSING_REQUIRED   a required spec had no token left
    TYPE_NOT_FOUND     the spec's type key has no registered converter
    CONVERSION_FAILED  the converter returned None for the token
    ARGUMENT_TOO_LONG  the infinite value exceeds the limit
    INVALID_FORMAT     the converter raised ValueError/TypeError for the token

There is no flag or named-option syntax: identity is purely positional and
spec names are only keys into the result.
"""
from collections import namedtuple

from .arguments import Simple, Infinite
from .faults import FaultCode, ArgumentNotFoundError, ArgumentTypeError
from .utils import *

MAX_INFINITE_LENGTH = 10_000

ArgumentValue = namedtuple("ArgumentValue", ("kind", "value"))


class Arguments:
    """
    Parsed values keyed by argument name, each remembering its kind.

        arguments["target"]                  # value, or ArgumentNotFoundError
        arguments.get("page", 1)             # value or default
        arguments.typed("count", int)        # value, or ArgumentTypeError
    """

    def __init__(self):
        self._values = {}

    def add(self, name, kind, value, /):
        self._values[name] = ArgumentValue(kind, value)

    def __getitem__(self, name):
        try:
            return self._values[name].value
        except KeyError:
            raise ArgumentNotFoundError(f"argument {name!r} was not provided") from None

    def get(self, name, default=None, /):
        try:
            return self._values[name].value
        except KeyError:
            return default

    def typed(self, name, type, /):
        if not isinstance(value := self[name], type):
            raise ArgumentTypeError(
                f"argument {name!r} is {value.__class__.__name__!r}, not {type.__name__!r}"
            )
        return value

    def kind(self, name, /):
        try:
            return self._values[name].kind
        except KeyError:
            raise ArgumentNotFoundError(f"argument {name!r} was not provided") from None

    def keys(self):
        return self._values.keys()

    def as_dict(self):
        return {name: value.value for name, value in self._values.items()}

    def __contains__(self, name):
        return name in self._values

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __eq__(self, other):
        if not isinstance(other, Arguments):
            return NotImplemented
        return self._values == other._values

    def __repr__(self):
        return f"arguments({self.as_dict()!r})"


class ParseError(metaclass=IntrospectiveType):
    __introspectable__ = ("kind", "argument", "input", "message")

    def __init__(self, kind, /, argument=None, input=None, message=""):
        if not isinstance(kind, FaultCode):
            raise TypeError(f"{type(self).__typename__} 'kind' must be a fault-code")
        self._kind = kind
        self._argument = argument
        self._input = input
        self._message = message

    @classmethod
    def missing_required(cls, argument, /):
        return cls(FaultCode.MISSING_REQUIRED, argument, None, f"missing required argument {argument!r}")

    @classmethod
    def type_not_found(cls, argument, key, /):
        return cls(FaultCode.TYPE_NOT_FOUND, argument, key, f"unknown argument type {key!r}")

    @classmethod
    def conversion_failed(cls, argument, input, /):
        return cls(FaultCode.CONVERSION_FAILED, argument, input, f"failed to convert {input!r} for argument {argument!r}")

    @classmethod
    def too_long(cls, argument, limit, /):
        return cls(FaultCode.ARGUMENT_TOO_LONG, argument, None, f"argument {argument!r} exceeds {limit} characters")

    @classmethod
    def invalid_format(cls, argument, input, /):
        return cls(FaultCode.INVALID_FORMAT, argument, input, f"invalid format {input!r} for argument {argument!r}")


class ParseResult(metaclass=IntrospectiveType):
    __introspectable__ = ("arguments", "error", "consumed")

    def __init__(self, arguments=None, error=None, consumed=0):
        self._arguments = arguments
        self._error = error
        self._consumed = consumed

    @classmethod
    def success(cls, arguments, consumed, /):
        return cls(arguments, None, consumed)

    @classmethod
    def failure(cls, error, /):
        return cls(None, error, 0)

    @property
    def ok(self):
        return self._error is None and self._arguments is not None

    def __bool__(self):
        return self.ok


class ArgumentParser:
    """
    Stateless positional parser bound to a converter registry.
    """

    def __init__(self, converters, /, limit=MAX_INFINITE_LENGTH):
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            raise ValueError("argument-parser 'limit' must be a non-negative integer")
        self._converters = converters
        self._limit = limit

    @property
    def limit(self):
        return self._limit

    def parse(self, command, tokens, /):
        tokens = tuple(tokens)
        arguments = Arguments()
        index = 0

        for argument in command.arguments:
            match argument.type:
                case Infinite():
                    return self._parse_infinite(argument, tokens, index, arguments)
                case Simple(key):
                    if index >= len(tokens):
                        return ParseResult.failure(ParseError.missing_required(argument.name))
                    if (error := self._parse_single(argument, key, tokens[index], arguments)) is not None:
                        return ParseResult.failure(error)
                    index += 1

        for argument in command.optional_arguments:
            if index >= len(tokens):
                break
            match argument.type:
                case Infinite():
                    return self._parse_infinite(argument, tokens, index, arguments)
                case Simple(key):
                    if (error := self._parse_single(argument, key, tokens[index], arguments)) is not None:
                        return ParseResult.failure(error)
                    index += 1

        return ParseResult.success(arguments, index)

    def _parse_single(self, argument, key, token, arguments):
        if key not in self._converters:
            return ParseError.type_not_found(argument.name, key)
        try:
            value = self._converters.convert(key, token)
        except (ValueError, TypeError):
            return ParseError.invalid_format(argument.name, token)
        if value is None:
            return ParseError.conversion_failed(argument.name, token)
        arguments.add(argument.name, argument.type, value)
        return None

    def _parse_infinite(self, argument, tokens, index, arguments):
        if len(value := " ".join(tokens[index:])) > self._limit:
            return ParseResult.failure(ParseError.too_long(argument.name, self._limit))
        arguments.add(argument.name, argument.type, value)
        return ParseResult.success(arguments, len(tokens))


__all__ = (
    "MAX_INFINITE_LENGTH",
    "ArgumentValue",
    "Arguments",
    "ParseError",
    "ParseResult",
    "ArgumentParser",
)
