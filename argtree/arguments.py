r"""
argtree argument specifications.

Overview
- Argument: declarative description of one command-line argument.
  • Named arguments declare one or more prefixed names: short names ("-v",
    usable in clusters like "-vk") and long names ("--verbose").
  • Positional arguments declare a single bare name ("file") and are bound by
    encounter order, before the first named argument of their command.
  • The value type (see argtree.types) decides how many values the argument
    consumes (its arity) and how the value texts are parsed.
- argument(...): decorator building an Argument and binding the decorated
  function as its callback.

Metadata (sanitized on construction)
- names: validated against r"(?P<p>[^\w\s])(?P=p)?[^\W_](-?[^\W_]+)*" for named
  arguments (a single prefix character followed by exactly one letter/digit
  for short names, the doubled prefix for long names) and against
  r"[^\W\d_](-?[^\W_]+)*" for positional ones. All names of an argument share
  one prefix character. Duplicates are rejected.
- type: value type or plain callable; nargs wraps single-value types into
  types.Multiple (type=int, nargs="+").
- required, repeatable: bool. repeatable defaults to what the type declares
  (Counter is repeatable).
- default: any value; Unset falls back to the type default.
- descr: Unset | str, non-empty when provided.
- callback: invoked with the final value once parsing succeeded for the argument.

Quick example
    >>> from argtree import Argument, argument, Boolean
    >>> verbose = Argument("-v", "--verbose", type=Boolean)
    >>> @argument("--threads", "-t", type=int)
    ... def on_threads(threads): ...
"""
import re
import warnings
from types import MethodType

from rich.text import Text

from .arity import Arity
from .faults import (
    ArgumentValueError,
    DelegatedCallbackError,
    DelegatedCallbackWarning,
    InvalidValueError,
    Level,
    Outcome,
    RequiredArgumentError,
    TypeNotice,
    ValueNotice,
)
from .types import Multiple, resolve
from .utils import *

_NAMED = re.compile(r"(?P<prefix>[^\w\s])(?P<long>(?P=prefix))?(?P<name>[^\W_](-?[^\W_]+)*)")
_BARE = re.compile(r"[^\W\d_](-?[^\W_]+)*")


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate names and derive prefix, short/long names and identifier.

    Mutates metadata in place, adding 'prefix', 'shorts', 'longs', 'positional'
    and 'identifier'.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    names = []
    shorts = []
    longs = []
    prefixes = set()
    positional = False

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")

        if _BARE.fullmatch(name):
            positional = True
        elif match := _NAMED.fullmatch(name):
            prefixes.add(match["prefix"])
            if match["long"]:
                longs.append(name)
            elif len(match["name"]) == 1:
                shorts.append(name)
            else:
                raise ValueError(f"{cls.__typename__} name {name!r} must use a doubled prefix to be a long name")
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} must be a valid argument name (unicodes are allowed)")
        names.append(name)

    if positional and len(names) > 1:
        raise ValueError(f"{cls.__typename__} positional arguments take exactly one bare name")
    if len(prefixes) > 1:
        raise ValueError(f"{cls.__typename__} names must share the same prefix character")

    metadata["names"] = tuple(names)
    metadata["shorts"] = tuple(shorts)
    metadata["longs"] = tuple(longs)
    metadata["positional"] = positional
    metadata["prefix"] = next(iter(prefixes), None)

    if positional:
        metadata["identifier"] = names[0]
    elif longs:
        metadata["identifier"] = longs[0].lstrip(metadata["prefix"])
    else:
        metadata["identifier"] = shorts[0][1:]


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the value type, arity shorthand, flags and description.
    """
    try:
        type = resolve(metadata["type"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'type' must be a value type or a callable") from None

    if (nargs := metadata.pop("nargs")) is not Unset:
        if type.arity != Arity.ONE:
            raise TypeError(f"{cls.__typename__} 'nargs' requires a single-value 'type'")
        try:
            type = Multiple(type, nargs)
        except TypeError:
            raise TypeError(f"{cls.__typename__} 'nargs' must be one of '?', '*', '+', or an integer") from None
    metadata["type"] = type
    metadata["arity"] = type.arity

    metadata["required"] = bool(metadata["required"])
    metadata["repeatable"] = bool(coalesce(metadata["repeatable"], getattr(type, "repeatable", False)))
    metadata["default"] = coalesce(metadata["default"], getattr(type, "default", None))

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not callable(callback := metadata["callback"]) and callback is not Unset:
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")


class Argument(metaclass=IntrospectableType):
    """
    Declarative description of one argument of a command.

    Arguments are immutable once built and hold no parse state: the parser keeps
    the per-parse bindings, so one Argument can serve any number of parses.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "names",
        "shorts",
        "longs",
        "prefix",
        "identifier",
        "positional",
        "type",
        "arity",
        "required",
        "repeatable",
        "default",
        "descr",
    )

    __displayable__ = (
        "identifier",
        "names",
        "type",
        "arity",
        "required",
    )

    def __init__(
            self,
            *names,
            type=str,
            nargs=Unset,
            required=False,
            repeatable=Unset,
            default=Unset,
            descr=Unset,
            callback=Unset
    ):
        """
        Construct an argument specification.

        Parameters
        - names: one or more str
          "-v", "--verbose" (named) or a single "file" (positional).
        - type: value type or callable (see argtree.types), str by default.
        - nargs: Unset | "?" | "*" | "+" | int
          Turns a single-value type into types.Multiple with that arity.
        - required: bool, report a diagnostic when the argument is never given.
        - repeatable: bool, allow several usages (values are combined by the type).
        - default: value when the argument is never given.
        - descr: short description.
        - callback: Callable[[value], Any], called once the value is final.
        """
        metadata = {
            "names": names,
            "type": type,
            "nargs": nargs,
            "required": required,
            "repeatable": repeatable,
            "default": default,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_names(Argument, metadata)
        _sanitize_metadata(Argument, metadata)

        self._callback = metadata.pop("callback")
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def conflicts(self, other, /):
        """
        Two arguments conflict when they share any name or their identifier.
        """
        return bool(set(self._names) & set(other._names)) or self._identifier == other._identifier

    def match_alias(self, text, /):
        return text in self._longs

    def match_name(self, prefix, char, /):
        return prefix == self._prefix and prefix + char in self._shorts

    def parse_values(self, values, /, **context):
        """
        Run the value type on well-formed values.

        Exceptions become InvalidValueError diagnostics; warnings become
        TypeNotice diagnostics. 'index' in context is the local index of the
        first value token, offsets reported by the type are added to it.
        """
        index = context.pop("index", 0)
        notes = []

        try:
            with warnings.catch_warnings(record=True) as captured:
                warnings.simplefilter("always")
                value = self._type.parse(tuple(values))
        except (ValueError, TypeError) as exception:
            return Outcome.failure(InvalidValueError(
                "invalid value for argument %r: %s" % (self._identifier, str(exception) or type(exception).__name__),
                index=index + getattr(exception, "offset", 0) if isinstance(exception, ArgumentValueError) else index,
                argument=self,
                hint="check the expected %s for %r" % ("value" if self._arity.max == 1 else "values", self._identifier),
                **context
            ))

        for warning in map(lambda x: x.message, captured):
            notes.append(TypeNotice(
                "%s (argument %r)" % (warning, self._identifier),
                index=index + getattr(warning, "offset", 0),
                level=warning.level if isinstance(warning, ValueNotice) else Level.WARNING,
                argument=self,
                **context
            ))
        if any(note.level >= Level.ERROR for note in notes):
            return Outcome.failure(*notes)
        return Outcome.success(value, *notes)

    def finalize(self, results, /, **context):
        """
        Produce the final value of the argument after its command was parsed.

        results: parsed values of every successful usage, in order.
        """
        if results:
            if len(results) == 1:
                return Outcome.success(results[0])
            return Outcome.success(self._type.combine(list(results)) if hasattr(self._type, "combine") else results[-1])
        if self._required:
            what = "positional argument" if self._positional else "argument"
            return Outcome.failure(RequiredArgumentError(
                "%s %r is required but was not given" % (what, self._identifier),
                argument=self,
                hint="add %s to the command line" % (
                    "a value for %r" % self._identifier if self._positional else "%r" % self._names[0]
                ),
                **context
            ))
        return Outcome.success(self._default)

    def invoke(self, value, /, **context):
        """
        Call the bound callback with the final value, if any.
        """
        if self._callback is Unset:
            return Outcome.success()

        try:
            with warnings.catch_warnings(record=True) as captured:
                warnings.simplefilter("always")
                self._callback(value)
        except Exception as exception:
            return Outcome.failure(DelegatedCallbackError(
                "something occurred in the callback of argument %r: %s" % (self._identifier, exception),
                argument=self,
                exception=exception,
                hint="check additional logs for more details",
                **context
            ))

        return Outcome.success(None, *(
            DelegatedCallbackWarning(
                "the callback of argument %r warned: %s" % (self._identifier, warning.message),
                argument=self,
                warning=warning.message,
                hint="check additional logs for more details",
                **context
            )
            for warning in captured
        ))

    def display(self):
        return self._names[0] if not self._positional else self._identifier.upper()


def argument(*args, **kwargs):
    """
    Decorator/factory for defining an argument handler.

    Usage
        @argument("--threads", "-t", type=int)
        def on_threads(threads): ...

    The decorated function becomes the argument callback; the decorator returns
    the configured Argument.
    """
    if "callback" in kwargs:
        raise TypeError("@argument() binds the decorated function as callback")
    spec = Argument(*args, **kwargs)

    @rename("argument")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@argument() must be applied to a callable")
        if spec._callback is not Unset:
            raise TypeError("@argument() must be applied only once")
        spec._callback = callback
        return spec

    wrapper.__argument__ = MethodType(rename(lambda self: spec, "__argument__"), wrapper)
    return wrapper


__all__ = (
    "Argument",
    "argument",
)
