"""
Value-count contracts.

An Arity is a closed range (min, max) telling the parser how many values an
argument consumes. max may be UNBOUNDED; min never is. Arity(n) is shorthand
for Arity(n, n), and Arity(0) (Arity.NONE) means the argument takes no values
at all (a switch).

Quick examples
    >>> Arity(1)            # exactly one value
    >>> Arity(0, 2)         # up to two values
    >>> Arity(1, UNBOUNDED) # one or more
    >>> Arity.of("*")       # nargs shorthand: zero or more
"""
import math
from collections import namedtuple

# Sentinel for an open upper bound; compares greater than any count.
UNBOUNDED = math.inf


class Arity(namedtuple("Arity", ("min", "max"))):
    __slots__ = ()

    def __new__(cls, min, max=None, /):
        if max is None:
            max = min
        if min == UNBOUNDED:
            raise ValueError("arity 'min' cannot be unbounded")
        if not isinstance(min, int) or isinstance(min, bool):
            raise TypeError("arity 'min' must be an integer")
        if max != UNBOUNDED and (not isinstance(max, int) or isinstance(max, bool)):
            raise TypeError("arity 'max' must be an integer or unbounded")
        if min < 0 or max < 0:
            raise ValueError("arity bounds cannot be negative")
        if min > max:
            raise ValueError("arity 'min' cannot be greater than 'max'")
        return super().__new__(cls, min, max)

    @classmethod
    def of(cls, nargs, /):
        """
        Build an arity from the familiar nargs shorthand.

        - "?" → 0..1, "*" → 0..∞, "+" → 1..∞
        - int n → exactly n
        - Arity → returned unchanged
        """
        if isinstance(nargs, Arity):
            return nargs
        match nargs:
            case "?":
                return cls.OPTIONAL
            case "*":
                return cls.ANY
            case "+":
                return cls.AT_LEAST_ONE
            case int() if not isinstance(nargs, bool):
                return cls(nargs)
        raise TypeError("arity shorthand must be one of '?', '*', '+', an integer or an arity")

    @property
    def range(self):
        return self.min != self.max

    @property
    def zero(self):
        return self.max == 0

    @property
    def unbounded(self):
        return self.max == UNBOUNDED

    def __contains__(self, count):
        return self.min <= count <= self.max

    def message(self):
        """
        Describe the contract for diagnostics ("1 value", "from 0 to 2 values").
        """
        if self.range:
            return "from %d to %s values" % (self.min, "any number of" if self.unbounded else self.max)
        return "%d value%s" % (self.min, "" if self.min == 1 else "s")

    def pattern(self):
        """
        Compact regex-like form ("{1}", "{0, 2}", "{1, ...}").
        """
        if self.range:
            return "{%d, %s}" % (self.min, "..." if self.unbounded else self.max)
        return "{%d}" % self.min

    def __repr__(self):
        return f"arity{self.pattern()}"


Arity.NONE = Arity(0)
Arity.ONE = Arity(1)
Arity.OPTIONAL = Arity(0, 1)
Arity.ANY = Arity(0, UNBOUNDED)
Arity.AT_LEAST_ONE = Arity(1, UNBOUNDED)


__all__ = (
    "UNBOUNDED",
    "Arity",
)
