"""
Registry shape validation tests.

AXIOM UNDER TEST:
=================
The first violation raises DatasetShapeError with the exact path; a
dataset that passes has unique code ids, ordered within the active and
deprecated partitions, with every active entry first.
"""

import copy

import pytest
from hypothesis import given, strategies as st

from registry_audit.errors import DatasetShapeError
from registry_audit.schema import (
    ArrayNode, BooleanNode, ObjectNode, SchemaValidator, StringNode, validate_node
)

from .fixtures import HASH_A, HASH_B, HASH_C, make_entry, make_testnet, standard_registry


def assert_invalid(dataset, path, fragment):
    with pytest.raises(DatasetShapeError) as exc:
        SchemaValidator().validate(dataset)
    assert exc.value.path == path
    assert fragment in exc.value.reason
    return exc.value


# =============================================================================
# VALID DATASETS
# =============================================================================

class TestValidDatasets:

    def test_standard_registry_is_valid(self):
        SchemaValidator().validate(standard_registry())

    def test_empty_registry_is_valid(self):
        SchemaValidator().validate([])

    def test_testnet_block_is_valid(self):
        SchemaValidator().validate([make_entry("1", HASH_A, testnet=make_testnet())])

    def test_code_ids_restart_in_deprecated_partition(self):
        SchemaValidator().validate([
            make_entry("4", HASH_A),
            make_entry("1", HASH_B, deprecated=True),
            make_entry("2", HASH_C, deprecated=True),
        ])


# =============================================================================
# REGISTRY-LEVEL RULES
# =============================================================================

class TestRegistryRules:

    def test_top_level_must_be_array(self):
        error = assert_invalid({"code_id": "1"}, "", "must be an array")
        assert str(error) == "<root> must be an array"

    def test_duplicate_code_id(self):
        dataset = [make_entry("1", HASH_A), make_entry("2", HASH_B), make_entry("2", HASH_C)]
        assert_invalid(dataset, "[2].code_id", "Duplicate code_id 2")

    def test_active_after_deprecated(self):
        dataset = [make_entry("1", HASH_A), make_entry("2", HASH_B, deprecated=True), make_entry("3", HASH_C)]
        assert_invalid(dataset, "[2]", "Active contracts should come before deprecated contracts")

    def test_active_out_of_order(self):
        dataset = [make_entry("10", HASH_A, name="Ten"), make_entry("9", HASH_B, name="Nine")]
        assert_invalid(dataset, "[1]", "Active contracts not in code_id order: Ten (10) comes before Nine (9)")

    def test_order_is_numeric_not_lexical(self):
        SchemaValidator().validate([make_entry("9", HASH_A), make_entry("10", HASH_B)])

    def test_deprecated_out_of_order(self):
        dataset = [
            make_entry("1", HASH_A),
            make_entry("8", HASH_B, deprecated=True, name="Eight"),
            make_entry("3", HASH_C, deprecated=True, name="Three"),
        ]
        assert_invalid(dataset, "[2]", "Deprecated contracts not in code_id order")

    def test_array_rules_run_before_entry_rules(self):
        broken = make_entry("1", HASH_A)
        del broken["author"]
        dataset = [broken, make_entry("1", HASH_B)]
        assert_invalid(dataset, "[1].code_id", "Duplicate code_id 1")


# =============================================================================
# ENTRY RULES
# =============================================================================

class TestEntryRules:

    def test_entry_must_be_object(self):
        assert_invalid([make_entry("1", HASH_A), "oops"], "[1]", "must be an object")

    def test_missing_required_field(self):
        entry = make_entry("1", HASH_A)
        del entry["hash"]
        assert_invalid([entry], "[0]", "missing required property: hash")

    def test_unknown_field(self):
        entry = make_entry("1", HASH_A)
        entry["website"] = "https://example.com"
        assert_invalid([entry], "[0]", "has unknown property: website")

    def test_lowercase_hash_rejected(self):
        assert_invalid([make_entry("1", HASH_A.lower())], "[0].hash", "uppercase hex")

    def test_short_hash_rejected(self):
        assert_invalid([make_entry("1", "AB" * 31)], "[0].hash", "64 characters")

    def test_hash_with_trailing_newline_rejected(self):
        assert_invalid([make_entry("1", HASH_A + "\n")], "[0].hash", "64 characters")

    def test_non_numeric_code_id(self):
        assert_invalid([make_entry("x1", HASH_A)], "[0].code_id", "must match pattern")

    def test_empty_name(self):
        assert_invalid([make_entry("1", HASH_A, name="")], "[0].name", "at least 1 characters")

    def test_governance_pattern(self):
        assert_invalid([make_entry("1", HASH_A, governance="genesis")], "[0].governance", "must match pattern")

    def test_numeric_governance_allowed(self):
        SchemaValidator().validate([make_entry("1", HASH_A, governance="42")])

    def test_deprecated_must_be_boolean(self):
        entry = make_entry("1", HASH_A)
        entry["deprecated"] = "false"
        assert_invalid([entry], "[0].deprecated", "must be a boolean")

    def test_description_must_be_string(self):
        entry = make_entry("1", HASH_A)
        entry["description"] = None
        assert_invalid([entry], "[0].description", "must be a string")


# =============================================================================
# NESTED OBJECTS
# =============================================================================

class TestNestedObjects:

    def test_release_url_must_be_https(self):
        entry = make_entry("1", HASH_A)
        entry["release"]["url"] = "http://example.com"
        assert_invalid([entry], "[0].release.url", "^https://")

    def test_author_missing_name(self):
        entry = make_entry("1", HASH_A)
        del entry["author"]["name"]
        assert_invalid([entry], "[0].author", "missing required property: name")

    def test_release_unknown_field(self):
        entry = make_entry("1", HASH_A)
        entry["release"]["date"] = "2024-01-01"
        assert_invalid([entry], "[0].release", "has unknown property: date")

    def test_testnet_timestamp_requires_milliseconds(self):
        testnet = make_testnet()
        testnet["deployed_at"] = "2025-01-15T10:30:00Z"
        assert_invalid([make_entry("1", HASH_A, testnet=testnet)], "[0].testnet.deployed_at", "milliseconds")

    def test_testnet_address(self):
        testnet = make_testnet()
        testnet["deployed_by"] = "not-an-address"
        assert_invalid([make_entry("1", HASH_A, testnet=testnet)], "[0].testnet.deployed_by", "bech32")

    def test_testnet_tx_hash(self):
        testnet = make_testnet()
        testnet["hash"] = "0x1234"
        assert_invalid([make_entry("1", HASH_A, testnet=testnet)], "[0].testnet.hash", "transaction hash")

    def test_testnet_missing_field(self):
        testnet = make_testnet()
        del testnet["network"]
        assert_invalid([make_entry("1", HASH_A, testnet=testnet)], "[0].testnet", "missing required property: network")


# =============================================================================
# GENERIC NODES
# =============================================================================

class TestGenericNodes:

    def test_plain_array_has_no_registry_rules(self):
        node = ArrayNode(items=StringNode(min_length=1))
        validate_node(["b", "a", "a"], node, "tags")

    def test_path_prefix_is_kept(self):
        node = ObjectNode(properties=(("flag", BooleanNode()),), required=("flag",))
        with pytest.raises(DatasetShapeError) as exc:
            validate_node({"flag": 1}, node, "settings")
        assert exc.value.path == "settings.flag"

    def test_does_not_mutate_input(self):
        dataset = standard_registry()
        snapshot = copy.deepcopy(dataset)
        SchemaValidator().validate(dataset)
        assert dataset == snapshot


# =============================================================================
# PROPERTIES
# =============================================================================

@given(st.lists(st.tuples(st.integers(min_value=0, max_value=50), st.booleans()), max_size=12))
def test_accepted_datasets_are_ordered_and_unique(rows):
    dataset = [
        make_entry(str(code_id), HASH_A, deprecated=deprecated)
        for code_id, deprecated in rows
    ]
    try:
        SchemaValidator().validate(dataset)
    except DatasetShapeError:
        return

    code_ids = [int(e["code_id"]) for e in dataset]
    assert len(set(code_ids)) == len(code_ids)

    flags = [e["deprecated"] for e in dataset]
    assert flags == sorted(flags)

    active = [int(e["code_id"]) for e in dataset if not e["deprecated"]]
    deprecated = [int(e["code_id"]) for e in dataset if e["deprecated"]]
    assert active == sorted(active)
    assert deprecated == sorted(deprecated)


@given(st.sets(st.integers(min_value=0, max_value=10_000), max_size=15), st.integers(min_value=0, max_value=15))
def test_sorted_partitions_are_accepted(code_ids, split):
    ordered = sorted(code_ids)
    dataset = [
        make_entry(str(code_id), HASH_A, deprecated=index >= split)
        for index, code_id in enumerate(ordered)
    ]
    SchemaValidator().validate(dataset)
