# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/utils/test_pattern_synth.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for simple pattern synthesis.
"""

# Standard
import re

# Third-Party
import pytest

# First-Party
from schemock.utils.pattern_synth import parse, synthesize, UnsupportedPattern
from schemock.utils.seeded_random import SeededRandom


@pytest.mark.parametrize(
    "pattern",
    [
        r"^[0-9]{3}-[0-9]{2}-[0-9]{4}$",
        r"^[A-Z]{2}\d{6}$",
        r"^ORD-\d+$",
        r"^[a-f0-9]{8}$",
        r"^\w{3,6}$",
        r"^v\d\.\d\.\d$",
        r"^colou?r$",
        r"ab*c",
        r"^[A-Za-z_][A-Za-z0-9_]{0,7}$",
    ],
)
def test_synthesized_value_matches(pattern):
    rng = SeededRandom(5)
    for _ in range(20):
        value = synthesize(pattern, rng)
        assert value is not None
        assert re.search(pattern, value)


def test_literal_pattern():
    assert synthesize("^SKU-001$", SeededRandom(1)) == "SKU-001"


@pytest.mark.parametrize("pattern", [r"(a|b)", r"^[^0-9]+$", r"^(?=x).*$", r"\bword", r"[unclosed", r"{3}"])
def test_unsupported_patterns_return_none(pattern):
    assert synthesize(pattern, SeededRandom(1)) is None


def test_parse_quantifiers():
    atoms = parse(r"a?b+c*d{2}e{1,3}f{2,}")
    assert [(alphabet, low) for alphabet, low, _ in atoms] == [("a", 0), ("b", 1), ("c", 0), ("d", 2), ("e", 1), ("f", 2)]
    assert atoms[3][2] == 2
    assert atoms[4][2] == 3
    assert atoms[5][2] > 2


def test_parse_rejects_groups():
    with pytest.raises(UnsupportedPattern):
        parse("(ab)+")
