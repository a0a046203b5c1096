"""Splitting a command line into words and tokens."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

QUOTES = "\"'"


class TokenKind(Enum):
    """What a token stands for once operators are recognised."""

    WORD = "word"
    PIPE = "|"
    INPUT = "<"
    OUTPUT = ">"
    APPEND = ">>"
    HEREDOC = "<<"


@dataclass
class Token:
    """One word of the command line with its flags."""

    text: str
    quoted: bool = False
    expanded: bool = False
    kind: TokenKind = TokenKind.WORD


def is_space(char: str) -> bool:
    """Tell whether ``char`` is a space, tab, newline, vertical tab, form feed or CR."""
    return char == " " or "\t" <= char <= "\r"


def open_quote(text: str) -> str | None:
    """Return the quote character left unclosed in ``text``, or None."""
    current = None
    for char in text:
        if char in QUOTES:
            if current is None:
                current = char
            elif char == current:
                current = None
    return current


def split_words(text: str) -> list[str]:
    """Split ``text`` on white space, keeping quoted sections inside their word."""
    words = []
    index = 0
    length = len(text)
    while index < length:
        if is_space(text[index]):
            index += 1
            continue
        start = index
        while index < length:
            if text[index] in QUOTES:
                close = text.find(text[index], index + 1)
                index = length if close == -1 else close + 1
            else:
                while (
                    index < length
                    and not is_space(text[index])
                    and text[index] not in QUOTES
                ):
                    index += 1
            if index >= length or is_space(text[index]):
                break
        words.append(text[start:index])
    return words


def has_quotes(text: str) -> bool:
    """Tell whether ``text`` holds a single or double quote."""
    return any(char in QUOTES for char in text)


def make_tokens(words: Iterable[str]) -> list[Token]:
    """Wrap words in tokens, marking those that hold quotes."""
    return [Token(word, quoted=has_quotes(word)) for word in words]


def strip_quotes(tokens: Iterable[Token]) -> list[Token]:
    """Remove the kind of quote that appears first in each token.

    A token keeps its quoted flag only if the text still runs past the
    position of that first quote.
    """
    result = []
    for token in tokens:
        first = next(
            (i for i, char in enumerate(token.text) if char in QUOTES), None
        )
        if first is None:
            result.append(replace(token, quoted=False))
            continue
        text = token.text.replace(token.text[first], "")
        quoted = token.quoted if first < len(text) else False
        result.append(replace(token, text=text, quoted=quoted))
    return result


def skip_quoted(text: str, index: int) -> int:
    """From a quote at ``index``, return the index of its closing quote.

    Returns the length of ``text`` when the quote is not closed, and
    ``index`` unchanged when no quote stands there.
    """
    if index < len(text) and text[index] in QUOTES:
        close = text.find(text[index], index + 1)
        return len(text) if close == -1 else close
    return index