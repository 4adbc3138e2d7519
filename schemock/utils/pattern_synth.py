# -*- coding: utf-8 -*-
"""Location: ./schemock/utils/pattern_synth.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Synthesis of strings matching simple regular expressions.

Only a linear subset is handled: literals, escapes (``\\d``, ``\\w``, ``\\s``
and escaped punctuation), ``.``, positive character classes with ranges, the
quantifiers ``?``, ``*``, ``+``, ``{n}``, ``{n,}``, ``{n,m}`` and the ``^``/``$``
anchors. Groups, alternation, negated classes and lookarounds are not solved;
``synthesize`` returns None for them so the caller can fall back to a random
string. Every synthesized value is checked against the real pattern with
``re`` before it is returned.

Examples:
    >>> from schemock.utils.seeded_random import SeededRandom
    >>> rng = SeededRandom(11)
    >>> value = synthesize(r"^[A-Z]{3}-\\d{4}$", rng)
    >>> bool(re.fullmatch(r"[A-Z]{3}-\\d{4}", value))
    True
    >>> synthesize("^SKU-001$", rng)
    'SKU-001'
    >>> synthesize("(cat|dog)", rng) is None
    True
"""

# Standard
import re
import string
from typing import List, Optional, Tuple

# First-Party
from schemock.utils.seeded_random import SeededRandom

DIGITS = string.digits
WORD = string.ascii_letters + string.digits + "_"
ANY = string.ascii_letters + string.digits

# Upper bound added to open-ended quantifiers (*, +, {n,})
OPEN_REPEAT = 3

_UNSUPPORTED = set("()|")


class UnsupportedPattern(Exception):
    """Raised internally when a pattern uses constructs outside the subset."""


Atom = Tuple[str, int, int]


def _parse_class(pattern: str, pos: int) -> Tuple[str, int]:
    """Parse a ``[...]`` class starting right after ``[``.

    Args:
        pattern: Whole pattern.
        pos: Index of the first character inside the brackets.

    Returns:
        Tuple[str, int]: Characters of the class and the index after ``]``.

    Raises:
        UnsupportedPattern: For negated or unterminated classes.
    """
    if pos < len(pattern) and pattern[pos] == "^":
        raise UnsupportedPattern("negated class")
    chars: List[str] = []
    while pos < len(pattern) and pattern[pos] != "]":
        char = pattern[pos]
        if char == "\\" and pos + 1 < len(pattern):
            escaped = pattern[pos + 1]
            chars.append({"d": DIGITS, "w": WORD, "s": " "}.get(escaped, escaped))
            pos += 2
            continue
        if pos + 2 < len(pattern) and pattern[pos + 1] == "-" and pattern[pos + 2] != "]":
            low, high = ord(char), ord(pattern[pos + 2])
            if high < low:
                raise UnsupportedPattern("reversed range")
            chars.append("".join(chr(code) for code in range(low, high + 1)))
            pos += 3
            continue
        chars.append(char)
        pos += 1
    if pos >= len(pattern):
        raise UnsupportedPattern("unterminated class")
    members = "".join(chars)
    if not members:
        raise UnsupportedPattern("empty class")
    return members, pos + 1


def _parse_quantifier(pattern: str, pos: int) -> Tuple[int, int, int]:
    """Parse an optional quantifier following an atom.

    Args:
        pattern: Whole pattern.
        pos: Index right after the atom.

    Returns:
        Tuple[int, int, int]: Minimum and maximum repetitions, and the index after the quantifier.

    Raises:
        UnsupportedPattern: For malformed braces.
    """
    if pos >= len(pattern):
        return 1, 1, pos
    char = pattern[pos]
    if char == "?":
        return 0, 1, pos + 1
    if char == "*":
        return 0, OPEN_REPEAT, pos + 1
    if char == "+":
        return 1, 1 + OPEN_REPEAT, pos + 1
    if char == "{":
        match = re.match(r"\{(\d+)(,(\d*))?\}", pattern[pos:])
        if not match:
            raise UnsupportedPattern("malformed repetition")
        low = int(match.group(1))
        if match.group(2) is None:
            high = low
        elif match.group(3):
            high = int(match.group(3))
        else:
            high = low + OPEN_REPEAT
        return low, max(low, high), pos + match.end()
    return 1, 1, pos


def parse(pattern: str) -> List[Atom]:
    """Split a pattern into ``(alphabet, min, max)`` atoms.

    Args:
        pattern: Regular expression.

    Returns:
        List[Atom]: Atoms in order.

    Raises:
        UnsupportedPattern: If the pattern is outside the supported subset.

    Examples:
        >>> parse(r"a\\d{2}")
        [('a', 1, 1), ('0123456789', 2, 2)]
    """
    body = pattern
    if body.startswith("^"):
        body = body[1:]
    if body.endswith("$") and not body.endswith("\\$"):
        body = body[:-1]

    atoms: List[Atom] = []
    pos = 0
    while pos < len(body):
        char = body[pos]
        if char in _UNSUPPORTED or char in "^$":
            raise UnsupportedPattern(f"unsupported construct {char!r}")
        if char == "\\":
            if pos + 1 >= len(body):
                raise UnsupportedPattern("dangling escape")
            escaped = body[pos + 1]
            if escaped in "DWSbB" or escaped.isdigit():
                raise UnsupportedPattern(f"unsupported escape \\{escaped}")
            alphabet = {"d": DIGITS, "w": WORD, "s": " "}.get(escaped, escaped)
            pos += 2
        elif char == "[":
            alphabet, pos = _parse_class(body, pos + 1)
        elif char == ".":
            alphabet, pos = ANY, pos + 1
        elif char in "?*+{":
            raise UnsupportedPattern("quantifier without atom")
        else:
            alphabet, pos = char, pos + 1
        low, high, pos = _parse_quantifier(body, pos)
        atoms.append((alphabet, low, high))
    return atoms


def synthesize(pattern: str, rng: SeededRandom) -> Optional[str]:
    """Build a string matching ``pattern``.

    Args:
        pattern: Regular expression.
        rng: Random source.

    Returns:
        Optional[str]: A matching string, or None when the pattern is not in the supported subset.
    """
    try:
        atoms = parse(pattern)
        compiled = re.compile(pattern)
    except (UnsupportedPattern, re.error):
        return None

    parts = []
    for alphabet, low, high in atoms:
        for _ in range(rng.next_int(low, high)):
            parts.append(alphabet[rng.next_int(0, len(alphabet) - 1)])
    value = "".join(parts)
    return value if compiled.search(value) else None
