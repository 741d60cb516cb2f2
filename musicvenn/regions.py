"""
Venn region decomposition of labelled name lists.

A region is identified by its combination key: the frozenset of labels whose
collections contain an item. The decomposition maps every combination that
has at least one member to the item names belonging to exactly that
combination and no other.
"""
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

Combination = FrozenSet[str]
RegionDecomposition = Dict[Combination, List[str]]


@dataclass(frozen=True)
class NamedCollection:
    """One ranked list, already truncated to the display count."""

    label: str
    items: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))


# ---------------------------------------------------------------------------
# Combination helpers
# ---------------------------------------------------------------------------

def combination_bits(combination: Iterable[str], labels: Sequence[str]) -> Tuple[int, ...]:
    """
    Binary membership key of `combination` over `labels`, e.g. (1, 0, 1).
    """
    combination = frozenset(combination)
    return tuple(int(label in combination) for label in labels)


def all_combinations(labels: Sequence[str]) -> List[Combination]:
    """
    Every non-empty combination of `labels` in binary-counting order,
    bit j standing for labels[j]: A, B, AB, C, AC, BC, ABC for three labels.
    """
    N = len(labels)
    return [
        frozenset(labels[j] for j in range(N) if (i >> j) & 1)
        for i in range(1, 2 ** N)
    ]


def subset_sizes(decomposition: RegionDecomposition, labels: Sequence[str]) -> Tuple[int, ...]:
    """Region sizes in `all_combinations(labels)` order."""
    return tuple(len(decomposition.get(key, ())) for key in all_combinations(labels))


def present_labels(decomposition: RegionDecomposition, labels: Sequence[str]) -> List[str]:
    """Labels (in the given order) that take part in at least one region."""
    used: Set[str] = set()
    for key in decomposition:
        used.update(key)
    return [label for label in labels if label in used]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate(collections: Sequence[NamedCollection]) -> RegionDecomposition:
    """
    Compute the full region decomposition of `collections`.

    Membership is set-based per collection: an item listed twice in the same
    collection counts once. Each item lands in the region keyed by every
    collection containing it (exact string match). Within a region, items
    keep the order in which their owning collections were passed.

    Empty input gives an empty decomposition; an empty collection takes part
    in the comparison but contributes no region.
    """
    labels = [c.label for c in collections]
    if len(set(labels)) != len(labels):
        raise ValueError(f"Collection labels must be distinct, got {labels}.")

    members = [set(c.items) for c in collections]
    regions: RegionDecomposition = {}
    placed: Set[Tuple[Combination, str]] = set()

    for collection in collections:
        for item in collection.items:
            key = frozenset(
                label for label, member in zip(labels, members) if item in member
            )
            if (key, item) in placed:
                continue
            placed.add((key, item))
            regions.setdefault(key, []).append(item)

    logger.debug(
        "Aggregated %d collection(s) into %d region(s).", len(collections), len(regions)
    )
    return regions
