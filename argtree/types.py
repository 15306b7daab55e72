r"""
Value types: how an argument turns its raw value texts into a Python value.

Contract
- A value type is any object exposing:
  • arity: Arity, how many values the argument consumes;
  • parse(values): receives the value texts (a tuple of str, in encounter
    order, already checked against arity) and returns the parsed value.
- Optional members:
  • default: value used when the argument is never given (None otherwise);
  • combine(results): merge the parsed values of repeated usages (last wins
    unless the type says otherwise).
- Problems are reported the Python way: raise ValueError/TypeError (or
  ArgumentValueError with an offset pointing at the offending value) to reject
  the values, warn ValueNotice (or any Warning) for non-fatal remarks.

Plain callables (str, int, pathlib.Path, ...) are accepted wherever a value
type is expected and behave as single-value converters (see resolve()).

Built-ins
- String, Integer, Float: single value converters.
- Boolean: no values, True when present (False by default).
- Counter: no values, counts repeated usages (-vvv → 3).
- File: one existing file path.
- Choice(*choices): one value among a closed set.
- Multiple(inner, nargs): several values, each parsed by inner.
- KeyValues(inner): "key=value" pairs (or key value sequences) into a dict.
"""
import builtins
import os.path
import warnings
from pathlib import Path

from .arity import Arity
from .faults import ArgumentValueError, ValueNotice, Level
from .utils import Unset, coalesce


class Converter:
    """
    Single-value type built from a plain callable.
    """
    arity = Arity.ONE
    default = None

    def __init__(self, callback, /, name=Unset):
        if not callable(callback):
            raise TypeError("converter 'callback' must be callable")
        self._callback = callback
        self.name = coalesce(name, getattr(callback, "__name__", "value"))

    def parse(self, values):
        value, = values
        return self._callback(value)

    def combine(self, results):
        return results[-1]

    def __repr__(self):
        return f"converter({self.name})"


class String(Converter):
    def __init__(self):
        super().__init__(str, "string")


class Integer(Converter):
    def __init__(self):
        super().__init__(int, "integer")

    def parse(self, values):
        value, = values
        try:
            return int(value, 0)
        except ValueError:
            raise ArgumentValueError("%r is not a valid integer" % value) from None


class Float(Converter):
    def __init__(self):
        super().__init__(float, "float")

    def parse(self, values):
        value, = values
        try:
            return float(value)
        except ValueError:
            raise ArgumentValueError("%r is not a valid number" % value) from None


class Boolean:
    """
    Presence-only switch.
    """
    arity = Arity.NONE
    default = False

    def parse(self, values):
        return True

    def combine(self, results):
        return results[-1]

    def __repr__(self):
        return "boolean"


class Counter:
    """
    Presence-only switch that counts how many times it was given.
    """
    arity = Arity.NONE
    default = 0
    repeatable = True

    def parse(self, values):
        return 1

    def combine(self, results):
        return sum(results)

    def __repr__(self):
        return "counter"


class File(Converter):
    """
    One path to an existing regular file.
    """

    def __init__(self, *, exists=True):
        super().__init__(Path, "file")
        self.exists = bool(exists)

    def parse(self, values):
        value, = values
        path = Path(os.path.expanduser(value))
        if self.exists and not path.is_file():
            raise ArgumentValueError("file %r does not exist" % value)
        return path


class Choice(Converter):
    def __init__(self, *choices):
        if not choices:
            raise TypeError("choice must specify at least one choice")
        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError("choice choices must be strings")
            if choice in sanitized:
                raise ValueError("choice choices cannot contain duplicates")
            sanitized.append(choice)
        super().__init__(str, "choice")
        self.choices = tuple(sanitized)

    def parse(self, values):
        value, = values
        if value not in self.choices:
            raise ArgumentValueError("%r is not one of %s" % (value, ", ".join(map(repr, self.choices))))
        return value


class Multiple:
    """
    Several values parsed one by one with an inner single-value type.
    """
    default = ()

    def __init__(self, inner=str, /, nargs="+"):
        self.inner = resolve(inner)
        if self.inner.arity != Arity.ONE:
            raise TypeError("multiple 'inner' type must take exactly one value")
        self.arity = Arity.of(nargs)

    def parse(self, values):
        parsed = []
        for offset, value in enumerate(values):
            try:
                parsed.append(self.inner.parse((value,)))
            except ArgumentValueError as exception:
                raise ArgumentValueError(str(exception), offset) from None
            except (ValueError, TypeError) as exception:
                raise ArgumentValueError(str(exception) or "invalid value %r" % value, offset) from None
        return tuple(parsed)

    def combine(self, results):
        return tuple(value for result in results for value in result)

    def __repr__(self):
        return f"multiple({self.inner!r}, {self.arity!r})"


class KeyValues:
    """
    Mapping built from "key=value" values.

    The tokenizer splits unquoted text on '=', so both '[a=1 b=2]' (tokenized
    as a, 1, b, 2) and '["a=1" "b=2"]' produce {'a': 1, 'b': 2}.
    """
    arity = Arity.AT_LEAST_ONE
    default = None

    def __init__(self, inner=str, /):
        self.inner = resolve(inner)
        if self.inner.arity != Arity.ONE:
            raise TypeError("key-values 'inner' type must take exactly one value")

    def parse(self, values):
        pairs = {}
        offset = 0
        while offset < len(values):
            key = values[offset]
            if "=" in key:
                key, value = key.split("=", 1)
                step = 1
            elif offset + 1 < len(values):
                value = values[offset + 1]
                step = 2
            else:
                raise ArgumentValueError("key %r has no value" % key, offset)

            if not key:
                raise ArgumentValueError("empty key", offset)
            if key in pairs:
                warnings.warn(ValueNotice("key %r was given more than once, last value wins" % key, Level.WARNING, offset))
            try:
                pairs[key] = self.inner.parse((value,))
            except (ValueError, TypeError) as exception:
                raise ArgumentValueError(str(exception) or "invalid value for key %r" % key, offset + step - 1) from None
            offset += step
        return pairs

    def combine(self, results):
        merged = {}
        for result in results:
            merged |= result
        return merged

    def __repr__(self):
        return f"key-values({self.inner!r})"


def resolve(type, /):
    """
    Return a value type for a declared argument type.

    Built-in type classes are instantiated with their defaults (type=Boolean),
    objects exposing arity and parse() are used as-is, other callables become
    single-value converters (type=int).
    """
    if isinstance(type, builtins.type) and issubclass(type, (Converter, Boolean, Counter, Multiple, KeyValues)):
        type = type()
    if not isinstance(type, builtins.type) and hasattr(type, "arity") and callable(getattr(type, "parse", None)):
        if not isinstance(type.arity, Arity):
            raise TypeError("value type 'arity' must be an arity")
        return type
    if callable(type):
        return Converter(type)
    raise TypeError("value type must be callable or provide 'arity' and 'parse()'")


__all__ = (
    "Converter",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "Counter",
    "File",
    "Choice",
    "Multiple",
    "KeyValues",
    "resolve",
)
