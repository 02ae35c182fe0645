"""Piecewise lexer - template text to tokens."""

from piecewise.lexer.lexer import Lexer, lex
from piecewise.lexer.spec import (
    IncludeToken,
    LexError,
    OperatorToken,
    TextToken,
    Token,
    TokenKind,
    VariableToken,
)

__all__ = [
    "Lexer",
    "lex",
    "Token",
    "TokenKind",
    "TextToken",
    "IncludeToken",
    "VariableToken",
    "OperatorToken",
    "LexError",
]
