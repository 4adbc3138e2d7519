# -*- coding: utf-8 -*-
"""Location: ./schemock/utils/heuristics.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Property-name and format heuristics.

Picks semantically plausible values from a property name (``email``,
``firstName``, ``price``, ``createdAt``...) or a string ``format``. People,
places, companies and phone numbers come from Faker, reseeded from the
supplied random source before each draw, so values stay reproducible under a
seed. Dates are drawn from a fixed window instead of the wall clock.

Examples:
    >>> from schemock.utils.seeded_random import SeededRandom
    >>> rng = SeededRandom(1)
    >>> name_tokens("createdAt"), name_tokens("phone_number"), name_tokens("userID")
    (['created', 'at'], ['phone', 'number'], ['user', 'id'])
    >>> isinstance(string_for_property("city", rng), str)
    True
    >>> string_for_property("width", rng) is None
    True
    >>> 18 <= number_for_property("age", rng, integer=True) <= 78
    True
    >>> string_for_format("unknown-format", rng) is None
    True
"""

# Standard
from datetime import datetime, timedelta, timezone
import re
from typing import List, Optional, Union

# Third-Party
from faker import Faker

# First-Party
from schemock.utils.seeded_random import SeededRandom

faker = Faker()

# Dates are drawn from [DATE_WINDOW_START, DATE_WINDOW_START + DATE_WINDOW_DAYS)
DATE_WINDOW_START = datetime(2023, 1, 1, tzinfo=timezone.utc)
DATE_WINDOW_DAYS = 3 * 365

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")

Number = Union[int, float]


def seeded_faker(rng: SeededRandom) -> Faker:
    """Reseed the shared Faker instance from the random source.

    Args:
        rng: Random source.

    Returns:
        Faker: The shared instance, ready for one draw.

    Examples:
        >>> seeded_faker(SeededRandom(5)).name() == seeded_faker(SeededRandom(5)).name()
        True
    """
    faker.seed_instance(rng.next_int(0, 2**32 - 1))
    return faker


def name_tokens(name: str) -> List[str]:
    """Split a property name into lower-case words.

    Args:
        name: Property name in camelCase, snake_case, kebab-case or plain form.

    Returns:
        List[str]: Lower-case words.
    """
    spaced = _ACRONYM_BOUNDARY.sub(r"\1 \2", _CAMEL_BOUNDARY.sub(r"\1 \2", name))
    return [token.lower() for token in _SEPARATORS.split(spaced) if token]


def random_datetime(rng: SeededRandom) -> datetime:
    """Draw a UTC datetime from the fixed date window.

    Args:
        rng: Random source.

    Returns:
        datetime: Timezone-aware datetime with millisecond precision.
    """
    offset_ms = rng.next_int(0, DATE_WINDOW_DAYS * 24 * 3600 * 1000 - 1)
    return DATE_WINDOW_START + timedelta(milliseconds=offset_ms)


def iso_timestamp(moment: datetime) -> str:
    """Render a datetime the way JavaScript's ``toISOString`` does.

    Args:
        moment: Timezone-aware datetime.

    Returns:
        str: ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Examples:
        >>> iso_timestamp(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
        '2024-05-01T12:00:00.000Z'
    """
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def string_for_format(fmt: str, rng: SeededRandom) -> Optional[str]:
    """Synthesize a string for a known ``format``.

    Args:
        fmt: Format name.
        rng: Random source.

    Returns:
        Optional[str]: Value for the format, None when the format is unknown.

    Examples:
        >>> rng = SeededRandom(2)
        >>> bool(re.fullmatch(r"\\d{4}-\\d{2}-\\d{2}", string_for_format("date", rng)))
        True
        >>> bool(re.fullmatch(r"\\d{2}:\\d{2}:\\d{2}", string_for_format("time", rng)))
        True
        >>> string_for_format("email", rng).endswith("@example.com")
        True
    """
    if fmt == "uuid":
        return rng.uuid4()
    if fmt == "email":
        return f"test{rng.next_int(0, 999)}@example.com"
    if fmt == "date-time":
        return iso_timestamp(random_datetime(rng))
    if fmt == "date":
        return random_datetime(rng).date().isoformat()
    if fmt == "time":
        return random_datetime(rng).strftime("%H:%M:%S")
    if fmt in ("uri", "url"):
        return f"https://example.com/{rng.choice(['docs', 'items', 'profile', 'about'])}"
    if fmt == "hostname":
        return rng.choice(["example.com", "api.example.com", "mock.example.org"])
    if fmt == "ipv4":
        return ".".join(str(rng.next_int(0, 255)) for _ in range(4))
    if fmt == "ipv6":
        return ":".join(f"{rng.next_int(0, 0xFFFF):04x}" for _ in range(8))
    return None


def string_for_property(name: str, rng: SeededRandom) -> Optional[str]:
    """Synthesize a realistic string from a property name.

    Args:
        name: Property name hint.
        rng: Random source.

    Returns:
        Optional[str]: Value for the recognized category, None otherwise.

    Examples:
        >>> rng = SeededRandom(4)
        >>> len(string_for_property("name", rng).split()) >= 2
        True
        >>> any(ch.isdigit() for ch in string_for_property("phoneNumber", rng))
        True
        >>> bool(re.fullmatch(r"user\\d+@example\\.com", string_for_property("email", rng)))
        True
    """
    tokens = name_tokens(name)
    if not tokens:
        return None
    words = set(tokens)
    joined = "".join(tokens)

    if "email" in words or joined == "mail":
        return f"user{rng.next_int(0, 999)}@example.com"
    if joined in ("firstname", "givenname"):
        return seeded_faker(rng).first_name()
    if joined in ("lastname", "surname", "familyname"):
        return seeded_faker(rng).last_name()
    if joined == "username" or "login" in words:
        return f"user_{rng.next_int(100, 9999)}"
    if joined in ("name", "fullname", "displayname"):
        return seeded_faker(rng).name()
    if "password" in words or "secret" in words:
        return "********"
    if words & {"phone", "mobile", "telephone", "tel"}:
        return seeded_faker(rng).phone_number()
    if "city" in words:
        return seeded_faker(rng).city()
    if "country" in words:
        return seeded_faker(rng).country()
    if words & {"company", "organization", "organisation", "employer"}:
        return seeded_faker(rng).company()
    if words & {"address", "street"}:
        return seeded_faker(rng).street_address()
    if words & {"zip", "zipcode", "postcode"} or joined in ("postalcode", "zipcode"):
        return f"{rng.next_int(10000, 99999)}"
    if words & {"url", "website", "homepage", "link"}:
        return string_for_format("uri", rng)
    if "title" in words:
        return seeded_faker(rng).catch_phrase()
    if words & {"description", "summary", "bio"}:
        return seeded_faker(rng).sentence()
    if len(tokens) > 1 and tokens[-1] == "at" or words & {"timestamp", "datetime"}:
        return iso_timestamp(random_datetime(rng))
    if words & {"date", "birthday", "birthdate", "dob"}:
        return random_datetime(rng).date().isoformat()
    if tokens[-1] in ("id", "uuid", "guid"):
        return rng.uuid4()
    return None


def number_for_property(name: str, rng: SeededRandom, integer: bool = False) -> Optional[Number]:
    """Synthesize a realistic number from a property name.

    Args:
        name: Property name hint.
        rng: Random source.
        integer: Whether a whole number is required.

    Returns:
        Optional[Number]: Value for the recognized category, None otherwise.

    Examples:
        >>> rng = SeededRandom(8)
        >>> 1970 <= number_for_property("year", rng, integer=True) <= 2030
        True
        >>> price = number_for_property("price", rng)
        >>> 0 <= price <= 100 and round(price, 2) == price
        True
        >>> isinstance(number_for_property("totalAmount", rng, integer=True), int)
        True
    """
    words = set(name_tokens(name))
    if not words:
        return None

    if "age" in words:
        return rng.next_int(18, 78)
    if words & {"price", "amount", "cost", "salary", "balance"}:
        return rng.next_int(1, 100) if integer else round(rng.next_float(0, 100), 2)
    if "year" in words:
        return rng.next_int(1970, 2030)
    if words & {"rating", "stars"}:
        return rng.next_int(0, 5) if integer else round(rng.next_float(0, 5), 1)
    if words & {"quantity", "qty", "count", "stock"}:
        return rng.next_int(0, 100)
    return None
