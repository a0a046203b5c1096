"""Operator splitting, operator marking and syntax checks on the token list."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import replace

from .tokens import QUOTES, Token, TokenKind, is_space, skip_quoted

_PREFIXES = (
    ("|", TokenKind.PIPE),
    (">>", TokenKind.APPEND),
    ("<<", TokenKind.HEREDOC),
    (">", TokenKind.OUTPUT),
    ("<", TokenKind.INPUT),
)
_REDIRECTIONS = frozenset(
    {TokenKind.INPUT, TokenKind.OUTPUT, TokenKind.APPEND, TokenKind.HEREDOC}
)
_SPLIT_ORDER = "|><"


class ShellSyntaxError(Exception):
    """Raised when a command line breaks the shell's grammar."""

    status = 258


def operator_kind(text: str) -> TokenKind:
    """Classify ``text`` by the operator it starts with."""
    for prefix, kind in _PREFIXES:
        if text.startswith(prefix):
            return kind
    return TokenKind.WORD


def exact_operator_kind(text: str) -> TokenKind:
    """Classify ``text`` only when it is exactly an operator."""
    for prefix, kind in _PREFIXES:
        if text == prefix:
            return kind
    return TokenKind.WORD


def _split_at(text: str, op: str) -> tuple[str, str] | None:
    index = next(
        (i for i, char in enumerate(text) if char == op or char in QUOTES), len(text)
    )
    index = skip_quoted(text, index)
    found = text.find(op, index)
    if found == -1:
        return None
    if found == 0:
        if len(text) == 1:
            return None
        found = 1
    return text[:found], text[found:]


def _rejoin(tokens: Iterable[Token]) -> list[Token]:
    joined: list[Token] = []
    for token in tokens:
        if joined:
            last = joined[-1]
            if (
                last.text in ("<", ">")
                and not last.expanded
                and token.text.startswith(last.text)
            ):
                joined[-1] = replace(last, text=last.text + token.text)
                continue
        joined.append(token)
    return joined


def split_operators(tokens: Iterable[Token]) -> list[Token]:
    """Cut pipes and redirections out of unexpanded tokens.

    Neighbouring single ``<`` or ``>`` tokens are joined again afterwards,
    so ``>`` followed by ``>`` becomes ``>>``.
    """
    queue = deque(tokens)
    result = []
    while queue:
        token = queue.popleft()
        if not token.expanded:
            tails = []
            for op in _SPLIT_ORDER:
                parts = _split_at(token.text, op)
                if parts is not None:
                    head, tail = parts
                    tails.append(replace(token, text=tail))
                    token = replace(token, text=head)
            queue.extendleft(tails)
        result.append(token)
    return _rejoin(result)


def mark_operators(tokens: Iterable[Token]) -> list[Token]:
    """Set the kind of every unexpanded token from its leading operator."""
    return [
        token if token.expanded else replace(token, kind=operator_kind(token.text))
        for token in tokens
    ]


def outside_quotes(line: str, position: int) -> bool:
    """Tell whether ``position`` in ``line`` lies outside any quotes."""
    current = None
    for char in line[: position + 1]:
        if char in QUOTES:
            if current is None:
                current = char
            elif char == current:
                current = None
    return current is None


def has_spaced_operator(line: str, op: str) -> bool:
    """Tell whether two ``op`` characters stand apart with only spaces between."""
    length = len(line)
    index = 0
    while index < length:
        while index < length and line[index] != op:
            index += 1
        if index < length:
            index += 1
        while index < length and is_space(line[index]):
            index += 1
        if (
            index < length
            and line[index] == op
            and line[index - 1] != op
            and outside_quotes(line, index)
        ):
            return True
    return False


def has_consecutive_operators(tokens: Iterable[Token], line: str) -> bool:
    """Tell whether two redirections or two pipes follow one another."""
    tokens = list(tokens)
    if not tokens:
        return False
    if has_spaced_operator(line, "<") or has_spaced_operator(line, ">"):
        return True
    for current, following in zip(tokens, tokens[1:]):
        if current.kind in _REDIRECTIONS and following.kind in _REDIRECTIONS:
            return True
        if current.kind is TokenKind.PIPE and following.kind is TokenKind.PIPE:
            return True
    return False


def ends_with_operator(tokens: Iterable[Token]) -> bool:
    """Tell whether the last token is an operator."""
    tokens = list(tokens)
    return bool(tokens) and tokens[-1].kind is not TokenKind.WORD


def starts_with_pipe(tokens: Iterable[Token]) -> bool:
    """Tell whether the first token is a pipe."""
    tokens = list(tokens)
    return bool(tokens) and tokens[0].kind is TokenKind.PIPE


def has_empty_quotes(tokens: Iterable[Token]) -> bool:
    """Tell whether a token starts with ``''`` or is exactly ``\"\"``."""
    return any(
        token.text[:2] == "''" or token.text == '""' for token in tokens
    )


def check_syntax(tokens: Iterable[Token], line: str) -> None:
    """Raise ShellSyntaxError when the marked tokens break the grammar."""
    tokens = list(tokens)
    if has_consecutive_operators(tokens, line):
        raise ShellSyntaxError("syntax error: consecutive operators")
    if ends_with_operator(tokens):
        raise ShellSyntaxError("syntax error: open operator")
    if starts_with_pipe(tokens):
        raise ShellSyntaxError("syntax error: pipe at the beginning of the command")