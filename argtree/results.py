"""
Parsed values of one command level and explicit registration into user objects.

Overview
- ParsedArguments: read-only view of what a command level bound.
  • values: identifier -> final value (defaults included).
  • used: identifiers that actually appeared in the input.
  • child: ParsedArguments of the subcommand the input was delegated to.
  • forward: text after the "--" marker at this level, if any.
- field(identifier, extract=..., default=...): declare how one attribute of a
  user object is read from a ParsedArguments.
- into(parsed, factory, **fields): build a user object from declared fields,
  without any introspection of the factory.

Quick example
    >>> report = parser.parse("--verbose build --jobs 4")
    >>> report.parsed.get("build.jobs")
    4
    >>> options = report.parsed.into(Options, verbose="verbose", jobs=field("build.jobs", default=1))
"""
from collections import namedtuple
from types import MappingProxyType

from .utils import Unset


class ParsedArguments:
    """
    Values bound for one command level, linked to the delegated subcommand.
    """

    def __init__(self, name, values, /, used=(), child=None, forward=None):
        self._name = name
        self._values = MappingProxyType(dict(values))
        self._used = frozenset(used)
        self._child = child
        self._forward = forward

    @property
    def name(self):
        return self._name

    @property
    def values(self):
        return self._values

    @property
    def used(self):
        return self._used

    @property
    def child(self):
        return self._child

    @property
    def forward(self):
        return self._forward

    def subcommand(self, name, /):
        """
        Return the ParsedArguments of subcommand name, or None when the input
        was not delegated to it.
        """
        if self._child is not None and self._child.name == name:
            return self._child
        return None

    def get(self, *path, default=Unset):
        """
        Look up a value by path.

        Forms
        - get("jobs"): value bound at this level.
        - get("build.jobs") or get("build", "jobs"): value bound in a subcommand.

        A missing subcommand or identifier returns default, or raises KeyError
        when no default was given.
        """
        if not path:
            raise TypeError("get() requires at least one identifier")
        parts = [part for segment in path for part in segment.split(".")]

        level = self
        for name in parts[:-1]:
            if (level := level.subcommand(name)) is None:
                if default is not Unset:
                    return default
                raise KeyError(".".join(parts))

        if parts[-1] in level._values:
            return level._values[parts[-1]]
        if default is not Unset:
            return default
        raise KeyError(".".join(parts))

    def into(self, factory, /, **fields):
        return into(self, factory, **fields)

    def __getitem__(self, identifier):
        return self.get(identifier)

    def __contains__(self, identifier):
        return self.get(identifier, default=_MISSING) is not _MISSING

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "parsed-arguments(name=%r, values=%r, child=%r)" % (self._name, dict(self._values), self._child)

    def __rich_repr__(self):
        yield "name", self._name
        yield "values", dict(self._values)
        yield "used", sorted(self._used)
        yield "child", self._child
        yield "forward", self._forward


_MISSING = object()


class Field(namedtuple("Field", ("identifier", "extract", "default"))):
    __slots__ = ()

    def resolve(self, parsed, /):
        if (value := parsed.get(self.identifier, default=_MISSING)) is _MISSING:
            return parsed.get(self.identifier, default=self.default)
        return self.extract(value) if self.extract is not Unset else value


def field(identifier, /, extract=Unset, default=Unset):
    """
    Declare one field read from a ParsedArguments.

    - identifier: path as accepted by ParsedArguments.get().
    - extract: optional callable applied to the value found.
    - default: used when the path does not resolve (the subcommand was not
      taken); without it a missing path raises KeyError.
    """
    if not isinstance(identifier, str) or not identifier.strip():
        raise TypeError("field 'identifier' must be a non-empty string")
    if extract is not Unset and not callable(extract):
        raise TypeError("field 'extract' must be callable")
    return Field(identifier.strip(), extract, default)


def into(parsed, factory, /, **fields):
    """
    Build factory(**values) from declared fields.

    Field values may be given as a Field or as a plain path string.
    """
    if not isinstance(parsed, ParsedArguments):
        raise TypeError("into() first argument must be parsed arguments")
    if not callable(factory):
        raise TypeError("into() second argument must be callable")

    values = {}
    for name, declared in fields.items():
        if isinstance(declared, str):
            declared = field(declared)
        elif not isinstance(declared, Field):
            raise TypeError("into() field %r must be a string or a field()" % name)
        values[name] = declared.resolve(parsed)
    return factory(**values)


__all__ = (
    "ParsedArguments",
    "Field",
    "field",
    "into",
)
