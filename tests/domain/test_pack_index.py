from __future__ import annotations

import logging

import pytest

from packsync.domain.identity import NameNormalizer
from packsync.domain.pack_index import PackIndex, build_pack_index
from tests.helpers.fakes import InMemoryRecordStore, make_record


def test_build_index_maps_names_and_identifiers() -> None:
    store = InMemoryRecordStore.with_records(
        make_record("a1", "Bushido"),
        make_record("b2", "Courtesy", type_=None),
    )

    index = build_pack_index(store, NameNormalizer())

    assert index.identifiers == {"a1", "b2"}
    assert index.lookup_name("bushido::Item") == "a1"
    assert index.lookup_name("courtesy::Item") == "b2"
    assert index.duplicates == {}


def test_build_index_uses_store_document_type_as_default() -> None:
    store = InMemoryRecordStore.with_records(
        make_record("a1", "Air", type_=None), document_type="ring"
    )

    index = build_pack_index(store, NameNormalizer())

    assert index.default_type == "ring"
    assert index.lookup_name("air::ring") == "a1"


def test_duplicate_names_keep_first_and_warn(caplog: pytest.LogCaptureFixture) -> None:
    store = InMemoryRecordStore.with_records(
        make_record("a1", "Bushido"),
        make_record("a2", " BUSHIDŌ "),
        make_record("a3", "bushido"),
    )

    with caplog.at_level(logging.WARNING, logger="packsync.domain.pack_index"):
        index = build_pack_index(store, NameNormalizer())

    assert index.lookup_name("bushido::Item") == "a1"
    assert index.duplicates == {"bushido::Item": ["a2", "a3"]}
    assert "Duplicate names detected in pack world.test" in caplog.text


def test_register_does_not_override_existing_name() -> None:
    index = PackIndex(default_type="Item")
    index.add("a1", "bushido::Item")

    index.register("new", "bushido::Item")
    index.register("other", "courtesy::Item")

    assert index.lookup_name("bushido::Item") == "a1"
    assert index.lookup_name("courtesy::Item") == "other"
    assert index.has_identifier("new")
    assert not index.has_identifier(None)
