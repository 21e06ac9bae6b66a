"""
User-facing message templates sent by the dispatcher.

Templates use %token% placeholders:
- requirement_failed: %requirement%
- arg_not_recognized: %arg% (the offending token)
- argument_too_long:  %arg% (the argument name), %max%
- invalid_format:     %arg% (the offending token)

Resolution order, last wins:
1. DEFAULTS below,
2. a __messages__ mapping on the host's __main__ module,
3. keyword overrides given to Messages(...).
"""
import re
from types import MappingProxyType

DEFAULTS = MappingProxyType({
    "no_permission": "You do not have permission to use this command.",
    "only_in_context": "You can only use this command in-game.",
    "disabled": "This command is currently disabled.",
    "requirement_failed": "The requirement %requirement% was not met.",
    "arg_not_recognized": "Argument %arg% not recognized.",
    "argument_too_long": "Argument %arg% exceeds maximum length of %max% characters.",
    "invalid_format": "Invalid format for argument %arg%.",
    "internal_error": "Internal error: invalid argument type.",
})

_TOKEN = re.compile(r"%([a-z_]+)%")


class Messages:
    def __init__(self, **overrides):
        templates = dict(DEFAULTS) | dict(getattr(__import__("__main__"), "__messages__", {}))
        templates |= overrides
        for key, template in templates.items():
            if key not in DEFAULTS:
                raise ValueError(f"messages unknown template {key!r}")
            elif not isinstance(template, str):
                raise TypeError(f"messages template {key!r} must be a string")
            elif not template.strip():
                raise ValueError(f"messages template {key!r} cannot be empty")
        self._templates = MappingProxyType(templates)

    @property
    def templates(self):
        return self._templates

    def __getitem__(self, key):
        return self._templates[key]

    def format(self, key, /, **tokens):
        """
        Render a template, replacing %name% with tokens[name]. Unknown
        placeholders are left untouched.
        """
        return _TOKEN.sub(
            lambda match: str(tokens[match[1]]) if match[1] in tokens else match[0],
            self._templates[key],
        )

    def __repr__(self):
        return f"messages({dict(self._templates)!r})"


__all__ = (
    "DEFAULTS",
    "Messages",
)
