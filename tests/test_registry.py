"""Registry loading and index tests."""

import json

import pytest

from registry_audit.errors import DatasetShapeError, RegistryLoadError
from registry_audit.registry import RegistryIndex, load_registry, parse_records

from .fixtures import HASH_A, HASH_B, HASH_C, make_entry, make_testnet, standard_registry


class TestLoad:

    def test_load_round_trips_json(self, tmp_path):
        path = tmp_path / "contracts.json"
        path.write_text(json.dumps(standard_registry()), encoding="utf-8")
        assert load_registry(path) == standard_registry()

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryLoadError):
            load_registry(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "contracts.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(RegistryLoadError):
            load_registry(path)


class TestParse:

    def test_records_are_typed(self):
        records = parse_records([make_entry("1", HASH_A, testnet=make_testnet("77"))])
        record = records[0]
        assert record.code_id == "1"
        assert record.release.version == "v1.0.0"
        assert record.author.url == "https://example.com"
        assert record.testnet.code_id == "77"
        assert record.testnet.network == "xion-testnet-2"
        assert record.is_genesis

    def test_testnet_is_optional(self):
        assert parse_records([make_entry("1", HASH_A)])[0].testnet is None


class TestIndex:

    def test_lookups(self):
        index = RegistryIndex.build(parse_records(standard_registry()))
        assert index.get("5").name == "Beta"
        assert index.get("5").governance == "12"
        assert not index.get("5").is_genesis
        assert index.get_by_hash(HASH_C).code_id == "3"
        assert index.has_hash(HASH_A.lower())
        assert not index.has_code_id("99")

    def test_counts(self):
        index = RegistryIndex.build(parse_records(standard_registry()))
        assert index.total_count == 3
        assert index.genesis_count == 2

    def test_entries_follow_registry_order(self):
        index = RegistryIndex.build(parse_records(standard_registry()))
        assert [e.code_id for e in index.entries()] == ["1", "5", "3"]

    def test_duplicate_code_id_is_rejected(self):
        records = parse_records([make_entry("1", HASH_A), make_entry("1", HASH_B)])
        with pytest.raises(DatasetShapeError) as exc:
            RegistryIndex.build(records)
        assert exc.value.path == "[1].code_id"
