"""Tilde and variable expansion of tokens and here-document lines."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from itertools import takewhile

from .env import Environment
from .tokens import Token, is_space

_SPACE = " \t\n\v\f\r"


def _is_name_char(char: str) -> bool:
    return char.isascii() and char.isalnum()


def name_length(text: str) -> int:
    """Count the leading ASCII letters and digits of ``text``."""
    return sum(1 for _ in takewhile(_is_name_char, text))


def first_space(text: str) -> int | None:
    """Return the index of the first white-space character, or None."""
    return next((i for i, char in enumerate(text) if is_space(char)), None)


def quote_state(text: str, index: int) -> str | None:
    """Return the quote character governing ``index``, or None.

    A double quote anywhere before ``index`` wins; a single quote counts
    only while it is still open at ``index``.
    """
    prefix = text[:index]
    for position, char in enumerate(prefix):
        if char == '"':
            return '"'
        if char == "'":
            return None if "'" in prefix[position + 1 :] else "'"
    return None


def _next_dollar(text: str, start: int) -> int | None:
    index = text.find("$", start)
    while index != -1 and index + 1 < len(text):
        following = text[index + 1]
        if following not in '$"' and not is_space(following):
            return index
        index = text.find("$", index + 1)
    return None


def expand_variables(text: str, env: Environment, status: int) -> tuple[str, bool]:
    """Replace ``$NAME`` and ``$?`` in ``text``.

    Returns the new text and whether a variable (not ``$?``) was replaced.
    Raises RuntimeError when a replacement leaves nothing at the position
    of the dollar sign.
    """
    cursor = 0
    expanded = False
    while True:
        dollar = _next_dollar(text, cursor)
        if dollar is None:
            return text, expanded
        cursor = dollar + 1
        if quote_state(text, dollar) == "'":
            continue
        if text[dollar + 1] == "?":
            text = text[:dollar] + str(status) + text[dollar + 2 :]
        else:
            expanded = True
            start = dollar + 1
            end = start + name_length(text[start:])
            value = env.get(text[start:end]) or ""
            text = text[:dollar] + value + text[end:]
        if dollar >= len(text):
            raise RuntimeError("expander error")


def expand_tilde(text: str, env: Environment, fallback_home: str | None = None) -> str:
    """Expand a leading ``~`` or ``~/`` to the home directory."""
    home = env.get("HOME") or fallback_home or "~"
    if text == "~":
        return home
    if text.startswith("~/"):
        return home + text[1:]
    return text


def _resplit(token: Token) -> list[Token]:
    pieces = []
    text = token.text
    while (cut := first_space(text)) is not None:
        pieces.append(replace(token, text=text[:cut]))
        text = text[cut:].lstrip(_SPACE)
    pieces.append(replace(token, text=text))
    return pieces


def expand_tokens(
    tokens: Iterable[Token],
    env: Environment,
    status: int,
    fallback_home: str | None = None,
) -> list[Token]:
    """Expand every token and split unquoted expansions on white space."""
    result = []
    for token in tokens:
        token = replace(token, expanded=False)
        if not token.quoted and token.text.startswith("~"):
            result.append(
                replace(token, text=expand_tilde(token.text, env, fallback_home))
            )
            continue
        if "$" in token.text:
            text, expanded = expand_variables(token.text, env, status)
            token = replace(token, text=text, expanded=expanded)
        if token.expanded and not token.quoted:
            result.extend(_resplit(token))
        else:
            result.append(token)
    return result


def expand_heredoc_line(line: str, env: Environment, status: int) -> str:
    """Expand variables in a here-document line and end it with a newline."""
    text = f'"{line}"'
    if "$" in text:
        text, _ = expand_variables(text, env, status)
    return text[1:-1] + "\n"