# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/services/test_resource_store.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for ResourceStore.
"""

# Standard
import threading

# Third-Party
import pytest

# First-Party
from schemock.services.resource_store import find_index, ResourceStore, same_id


@pytest.fixture
def store():
    store = ResourceStore()
    with store.locked("users") as records:
        records.extend([{"id": "1", "name": "Ann"}, {"id": 2, "name": "Bob"}])
    return store


def test_locked_initializes_resource():
    store = ResourceStore()
    assert store.count("orders") == 0
    with store.locked("orders") as records:
        assert records == []
        records.append({"id": "o1"})
    assert store.count("orders") == 1


def test_find_compares_string_forms(store):
    assert store.find("users", "2")["name"] == "Bob"
    assert store.find("users", 1)["name"] == "Ann"
    assert store.find("users", "3") is None
    assert store.find("unknown", "1") is None


def test_find_returns_copy(store):
    store.find("users", "1")["name"] = "Changed"
    assert store.find("users", "1")["name"] == "Ann"


def test_find_inside_locked_block(store):
    with store.locked("users") as records:
        assert store.find("users", "2")["name"] == "Bob"
        records.append({"id": "3", "name": "Cy"})
    assert store.find("users", "3")["name"] == "Cy"


def test_find_index_skips_non_objects():
    records = ["1", {"name": "no id"}, {"id": 1}]
    assert find_index(records, "1") == 2
    assert find_index(records, "missing") is None


def test_insertion_order_preserved(store):
    with store.locked("users") as records:
        records.append({"id": "3", "name": "Cy"})
        assert [record["id"] for record in records] == ["1", 2, "3"]


def test_remove(store):
    assert store.remove("users", "2") == 1
    assert store.remove("users", "2") == 0
    assert store.count("users") == 1


def test_remove_all_matches():
    store = ResourceStore()
    with store.locked("items") as records:
        records.extend([{"id": "a"}, {"id": "a"}, {"id": "b"}])
    assert store.remove("items", "a") == 2
    with store.locked("items") as records:
        assert records == [{"id": "b"}]


def test_reset(store):
    with store.locked("orders") as records:
        records.append({"id": "o1"})
    store.reset("users")
    assert store.count("users") == 0
    assert store.count("orders") == 1
    store.reset()
    assert store.count("orders") == 0


def test_stores_are_isolated(store):
    other = ResourceStore()
    assert other.count("users") == 0


def test_same_id_requires_id_key():
    assert not same_id({"name": "x"}, "None")
    assert not same_id("id", "id")
    assert same_id({"id": 1.0}, "1.0")


def test_concurrent_read_modify_write():
    store = ResourceStore()

    def worker(offset):
        for index in range(100):
            with store.locked("counters") as records:
                records.append({"id": f"{offset}-{index}"})

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert store.count("counters") == 500
