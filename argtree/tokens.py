"""
Token model shared by the tokenizer, the parser and the diagnostic renderer.

A Token is an immutable (type, contents, index) triple; index is the position
of the token inside the token sequence of the command level that produced it.
"""
from collections import namedtuple
from enum import Enum


class TokenType(Enum):
    ARGUMENT_ALIAS = "argument-alias"
    ARGUMENT_NAME_LIST = "argument-name-list"
    ARGUMENT_VALUE = "argument-value"
    TUPLE_START = "tuple-start"
    TUPLE_END = "tuple-end"
    SUB_COMMAND = "sub-command"
    FORWARD_VALUE = "forward-value"


class Token(namedtuple("Token", ("type", "contents", "index"))):
    __slots__ = ()

    def __new__(cls, type, contents, index=0):
        if not isinstance(type, TokenType):
            raise TypeError("token 'type' must be a token-type")
        if not isinstance(contents, str):
            raise TypeError("token 'contents' must be a string")
        if not isinstance(index, int) or index < 0:
            raise ValueError("token 'index' must be a non-negative integer")
        return super().__new__(cls, type, contents, index)

    def display(self):
        """
        Return the token as a user would type it back.
        """
        if self.type is TokenType.ARGUMENT_VALUE and (not self.contents or any(c.isspace() for c in self.contents)):
            return '"%s"' % self.contents.replace('"', '\\"')
        if self.type is TokenType.FORWARD_VALUE:
            return "-- " + self.contents
        return self.contents

    def __repr__(self):
        return f"token({self.type.name.lower()}, {self.contents!r}, {self.index})"

    def __rich_repr__(self):
        yield self.type.name.lower()
        yield self.contents
        yield "index", self.index


__all__ = (
    "TokenType",
    "Token",
)
