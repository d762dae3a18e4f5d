from __future__ import annotations

import math
from dataclasses import dataclass

from case_browser.core.paths import is_missing, resolve, stringify


@dataclass
class _Client:
    name: str
    _secret: str = "hidden"


def test_resolve_walks_nested_mappings():
    record = {"client": {"name": "Alice", "country": {"code": "GB"}}}

    assert resolve(record, "client.name") == "Alice"
    assert resolve(record, "client.country.code") == "GB"


def test_resolve_missing_key_or_null_intermediate_is_none():
    record = {"client": None, "name": "Bob"}

    assert resolve(record, "client.name") is None
    assert resolve(record, "nope") is None
    assert resolve(record, "name.length") is None  # scalar intermediate


def test_resolve_reads_object_attributes_but_not_private_ones():
    record = {"owner": _Client(name="Carol")}

    assert resolve(record, "owner.name") == "Carol"
    assert resolve(record, "owner._secret") is None


def test_is_missing_covers_none_and_nan():
    assert is_missing(None)
    assert is_missing(float("nan"))
    assert not is_missing(0)
    assert not is_missing("")


def test_stringify_coercions():
    assert stringify(None) == ""
    assert stringify(math.nan) == ""
    assert stringify(True) == "true"
    assert stringify(False) == "false"
    assert stringify(3.0) == "3"
    assert stringify(2.5) == "2.5"
    assert stringify(42) == "42"
    assert stringify("Doe") == "Doe"
