"""
Command tree: a prefix tree over dot-joined label segments.

Structure
- The root node has no label. Every other node is keyed in its parent's
  children by its lowercased segment, so lookups are case-insensitive.
- A node may carry a command, children, or both.
- had_children marks nodes that have ever been descended through during
  registration. A node with had_children and no command is an intermediate
  group: a dispatch that stops on it, or tries to pass an argument to it,
  fails instead of falling through.

Labels
- "warp", "warp.set", "admin.user.ban": segments matching
  [A-Za-z][A-Za-z0-9_]*, each at most 64 characters, at most 10 segments.

Lookup rules (find)
- A child match always wins over treating a token as an argument value, so a
  subcommand named like a possible argument value stays reachable.
"""
import re
import warnings
from collections import namedtuple

from .faults import InvalidLabelError, OverriddenCommandWarning

MAX_SEGMENT_LENGTH = 64
MAX_DEPTH = 10

_SEGMENT = re.compile(r"[A-Za-z][A-Za-z0-9_]*")

Match = namedtuple("Match", ("node", "leftover"))


class Node:
    __slots__ = ("label", "parent", "children", "command", "had_children")

    def __init__(self, label=None, parent=None):
        self.label = label
        self.parent = parent
        self.children = {}
        self.command = None
        self.had_children = False

    @property
    def full_label(self):
        """
        Dot-joined labels from the first segment down to this node (None at root).
        """
        if self.parent is None:
            return None
        labels = []
        node = self
        while node.parent is not None:
            labels.append(node.label)
            node = node.parent
        return ".".join(reversed(labels))

    def __repr__(self):
        return f"node({self.full_label!r}, command={self.command!r}, children={list(self.children)!r})"


class CommandTree:
    """
    Registration, lookup and removal of commands by label path.
    """

    def __init__(self):
        self._root = Node()

    @property
    def root(self):
        return self._root

    @staticmethod
    def validate(label, /):
        """
        Check label shape and return its segments.

        Raises
        - TypeError: label is not a string.
        - InvalidLabelError: empty segment, bad characters, a segment longer
          than MAX_SEGMENT_LENGTH, or more than MAX_DEPTH segments.
        """
        if not isinstance(label, str):
            raise TypeError("validate() argument must be a string")
        segments = label.split(".")
        if len(segments) > MAX_DEPTH:
            raise InvalidLabelError(f"label {label!r} is deeper than {MAX_DEPTH} segments")
        for segment in segments:
            if not segment:
                raise InvalidLabelError(f"label {label!r} has an empty segment")
            elif len(segment) > MAX_SEGMENT_LENGTH:
                raise InvalidLabelError(f"label {label!r} has a segment longer than {MAX_SEGMENT_LENGTH} characters")
            elif not _SEGMENT.fullmatch(segment):
                raise InvalidLabelError(f"label {label!r} segment {segment!r} must match {_SEGMENT.pattern!r}")
        return segments

    def register(self, label, command, /):
        """
        Attach command at label, creating intermediate nodes as needed.

        A different command already attached at the same path is replaced
        (an OverriddenCommandWarning is issued). Returns the terminal node.
        """
        node = self._root
        for segment in self.validate(label):
            node.had_children = True
            if (child := node.children.get(key := segment.lower())) is None:
                child = node.children[key] = Node(key, node)
            node = child
        if node.command is not None and node.command is not command:
            warnings.warn(OverriddenCommandWarning(f"command at {label!r} replaced"), stacklevel=2)
        node.command = command
        return node

    def find(self, base, arguments=(), /):
        """
        Resolve base plus raw tokens to the deepest matching node.

        Returns Match(node, leftover) or None. leftover holds the tokens not
        consumed as child labels, starting at the first one that did not match
        a child of a node carrying a command.
        """
        if (node := self._root.children.get(base.lower())) is None:
            return None
        arguments = tuple(arguments)
        index = 0
        while index < len(arguments):
            if (child := node.children.get(arguments[index].lower())) is not None:
                node = child
                index += 1
            elif node.had_children and node.command is None:
                return None
            elif node.command is not None:
                break
            else:
                return None
        return Match(node, arguments[index:])

    def find_exact(self, segments, /):
        """
        Return the node at exactly this path (a dotted string or segments), or None.
        """
        if isinstance(segments, str):
            segments = segments.split(".")
        node = self._root
        for segment in segments:
            if (node := node.children.get(segment.lower())) is None:
                return None
        return node if node is not self._root else None

    def remove(self, label, /, prune=False):
        """
        Remove the command at label.

        - prune: detach the whole subtree; the parent forgets had_children once
          it has no children left.
        - otherwise: clear the command only, then drop this node and any
          ancestors left with neither a command nor children.

        Returns False when no node exists at label.
        """
        if (node := self.find_exact(label)) is None:
            return False
        if prune:
            parent = node.parent
            del parent.children[node.label]
            node.parent = None
            if not parent.children:
                parent.had_children = False
            return True
        node.command = None
        while node.parent is not None and not node.children and node.command is None:
            parent = node.parent
            del parent.children[node.label]
            node.parent = None
            if not parent.children:
                parent.had_children = False
            node = parent
        return True

    def walk(self):
        """
        Yield every node below the root, depth first, parents before children.
        """
        stack = list(reversed(self._root.children.values()))
        while stack:
            yield (node := stack.pop())
            stack.extend(reversed(node.children.values()))

    def clear(self):
        self._root = Node()

    def __contains__(self, label):
        return isinstance(label, str) and (node := self.find_exact(label)) is not None and node.command is not None

    def __repr__(self):
        return f"command-tree({", ".join(node.full_label for node in self.walk() if node.command is not None)})"


__all__ = (
    "MAX_SEGMENT_LENGTH",
    "MAX_DEPTH",
    "Match",
    "Node",
    "CommandTree",
)
