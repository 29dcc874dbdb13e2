# SPDX-License-Identifier: MIT
"""Tokenizer for VRML97 text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from vrml_fixer.errors import MalformedValueError

# Commas are whitespace in VRML97
TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>[\s,]+)
    | (?P<comment>\#[^\n\r]*)
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<punct>[{}\[\]])
    | (?P<word>[^\s,#"{}\[\]]+)
    """,
    re.VERBOSE | re.DOTALL,
)

ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


class TokenType(Enum):
    """Kinds of tokens in VRML97 text."""

    WORD = "word"
    STRING = "string"
    PUNCT = "punct"


@dataclass
class Token:
    """A token with the line it starts on."""

    type: TokenType
    text: str
    line: int

    def is_punct(self, char: str) -> bool:
        return self.type is TokenType.PUNCT and self.text == char

    def is_word(self, word: str) -> bool:
        return self.type is TokenType.WORD and self.text == word


def tokenize(text: str) -> Iterator[Token]:
    """Split VRML97 text into tokens, dropping whitespace and comments.

    String tokens carry their unescaped content without the quotes.

    Raises:
        MalformedValueError: on an unterminated string
    """
    line = 1
    pos = 0
    while pos < len(text):
        match = TOKEN_PATTERN.match(text, pos)
        if match is None:
            raise MalformedValueError(f"Unterminated string on line {line}")
        kind = match.lastgroup
        value = match.group()
        if kind == "string":
            yield Token(TokenType.STRING, ESCAPE_PATTERN.sub(r"\1", value[1:-1]), line)
        elif kind == "punct":
            yield Token(TokenType.PUNCT, value, line)
        elif kind == "word":
            yield Token(TokenType.WORD, value, line)
        line += value.count("\n")
        pos = match.end()
