import pytest

from musicvenn.regions import (
    NamedCollection,
    aggregate,
    all_combinations,
    combination_bits,
    present_labels,
    subset_sizes,
)


def key(*labels):
    return frozenset(labels)


def test_three_list_scenario(scenario_collections):
    regions = aggregate(scenario_collections)
    assert regions == {
        key("Personal"): ["A"],
        key("Personal", "Country"): ["B"],
        key("Personal", "Country", "World"): ["C"],
        key("Country", "World"): ["D"],
        key("World"): ["E"],
    }


def test_empty_input_gives_empty_decomposition():
    assert aggregate([]) == {}


def test_empty_collection_contributes_no_region():
    regions = aggregate([
        NamedCollection("Personal", ("A", "B")),
        NamedCollection("Country", ()),
        NamedCollection("World", ("B", "C")),
    ])
    assert all("Country" not in k for k in regions)
    assert regions == {
        key("Personal"): ["A"],
        key("Personal", "World"): ["B"],
        key("World"): ["C"],
    }


def test_single_collection_degenerates_to_one_region():
    regions = aggregate([NamedCollection("World", ("X", "Y"))])
    assert regions == {key("World"): ["X", "Y"]}


def test_duplicates_within_a_collection_count_once():
    regions = aggregate([
        NamedCollection("Personal", ("A", "A", "B")),
        NamedCollection("World", ("B", "B")),
    ])
    assert regions == {key("Personal"): ["A"], key("Personal", "World"): ["B"]}


def test_items_keep_collection_order():
    regions = aggregate([
        NamedCollection("Personal", ("Z", "M", "shared2", "shared1")),
        NamedCollection("World", ("shared1", "shared2", "Q")),
    ])
    assert regions[key("Personal")] == ["Z", "M"]
    assert regions[key("Personal", "World")] == ["shared2", "shared1"]


def test_membership_is_exact_string_match():
    regions = aggregate([
        NamedCollection("Personal", ("Drake",)),
        NamedCollection("World", ("drake", "Drake ")),
    ])
    assert regions == {key("Personal"): ["Drake"], key("World"): ["drake", "Drake "]}


def test_partition_matches_distinct_counts():
    collections = [
        NamedCollection("Personal", ("a", "b", "c", "d", "a")),
        NamedCollection("Country", ("c", "d", "e", "f")),
        NamedCollection("World", ("a", "d", "f", "g", "h")),
    ]
    regions = aggregate(collections)
    for collection in collections:
        total = sum(len(items) for k, items in regions.items() if collection.label in k)
        assert total == len(set(collection.items))


def test_aggregate_is_idempotent(scenario_collections):
    assert aggregate(scenario_collections) == aggregate(scenario_collections)
    assert list(aggregate(scenario_collections)) == list(aggregate(scenario_collections))


def test_duplicate_labels_rejected():
    with pytest.raises(ValueError):
        aggregate([NamedCollection("World", ("a",)), NamedCollection("World", ("b",))])


def test_collections_are_immutable():
    collection = NamedCollection("World", ["a", "b"])
    assert collection.items == ("a", "b")
    with pytest.raises(AttributeError):
        collection.label = "Other"


def test_combination_helpers(scenario_collections):
    labels = ("Personal", "Country", "World")
    assert combination_bits({"Personal", "World"}, labels) == (1, 0, 1)
    assert all_combinations(labels) == [
        key("Personal"),
        key("Country"),
        key("Personal", "Country"),
        key("World"),
        key("Personal", "World"),
        key("Country", "World"),
        key("Personal", "Country", "World"),
    ]
    regions = aggregate(scenario_collections)
    assert subset_sizes(regions, labels) == (1, 0, 1, 1, 0, 1, 1)
    assert present_labels({key("World"): ["x"]}, labels) == ["World"]
