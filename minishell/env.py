"""Shell variable table kept in insertion order."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

_SPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"
_INT_MAX = "2147483647"


def parse_entry(text: str) -> tuple[str, str | None] | None:
    """Split ``KEY=VALUE`` into its parts; an empty value becomes None.

    Returns None when the text holds no ``=``.
    """
    key, sep, value = text.partition("=")
    if not sep:
        return None
    return key, (value or None)


def parse_leading_int(text: str) -> int:
    """Read an optionally signed integer after leading white space, like atoi."""
    rest = text.lstrip(_SPACE)
    sign = 1
    if rest[:1] in ("+", "-"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    digits = []
    for char in rest:
        if char not in _DIGITS:
            break
        digits.append(char)
    return sign * int("".join(digits)) if digits else 0


def shlvl_overflows(text: str) -> bool:
    """Tell whether the leading digits of ``text`` reach the largest int."""
    length = 0
    for char in text:
        if char not in _DIGITS:
            break
        length += 1
    if length != len(_INT_MAX):
        return length > len(_INT_MAX)
    return text[: len(_INT_MAX)] >= _INT_MAX


def _shlvl_is_numeric(value: str) -> bool:
    index = 0
    while index < len(value):
        while index < len(value) and (value[index] in _SPACE or value[index] in "0+-"):
            index += 1
        if index >= len(value) or value[index] not in _DIGITS:
            return False
        index += 1
    return True


class Environment:
    """The shell's own copy of the environment variables."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._vars: dict[str, str | None] = {}
        for entry in entries:
            parsed = parse_entry(entry)
            if parsed is not None:
                self._vars.setdefault(*parsed)

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None when unset or empty."""
        return self._vars.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def export(self, assignment: str) -> None:
        """Apply ``NAME=value`` or ``NAME+=value`` to the table."""
        name_end = next(
            (i for i, char in enumerate(assignment) if char in "+="), len(assignment)
        )
        name = assignment[:name_end]
        if name in self._vars:
            self._update(name, assignment)
            return
        text = assignment
        if name_end < len(assignment) and assignment[name_end] == "+":
            text = name + assignment[name_end + 1 :]
        parsed = parse_entry(text)
        if parsed is not None:
            key, value = parsed
            self._vars[key] = value

    def _update(self, name: str, assignment: str) -> None:
        eq = assignment.find("=")
        if eq == -1:
            return
        appending = eq > 0 and assignment[eq - 1] == "+"
        rhs = assignment[eq + 1 :]
        current = self._vars[name]
        if appending and rhs and current is not None:
            self._vars[name] = current + rhs
        elif appending and not rhs:
            return
        elif rhs:
            self._vars[name] = rhs
        else:
            self._vars[name] = None

    def unset(self, key: str) -> None:
        """Remove ``key`` if it is present."""
        self._vars.pop(key, None)

    def items(self) -> Iterator[tuple[str, str | None]]:
        """Yield ``(key, value)`` pairs in insertion order."""
        yield from self._vars.items()

    def to_envp(self) -> list[str]:
        """Render the table as ``KEY=VALUE`` strings for a child process."""
        return [f"{key}={value or ''}" for key, value in self._vars.items()]

    def bump_shlvl(self) -> None:
        """Raise SHLVL by one, repairing values that are missing or malformed."""
        if "SHLVL" not in self._vars:
            self.export("SHLVL=1")
            return
        value = self._vars["SHLVL"]
        if value is None or not _shlvl_is_numeric(value):
            self._vars["SHLVL"] = "1"
            return
        level = parse_leading_int(value)
        if level < 0 or shlvl_overflows(value):
            self._vars["SHLVL"] = "0"
            return
        self._vars["SHLVL"] = str(level + 1)