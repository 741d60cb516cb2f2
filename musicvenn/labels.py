"""
Display strings and item lists for Venn regions.
"""
from typing import Iterable, List, Sequence, Set

from musicvenn.regions import RegionDecomposition

INTERSECTION_GLYPH = " ∩ "
EMPTY_TEXT = "(none)"


class RegionLabeler:
    """
    Labels combinations in the order the labels were declared to the session,
    so the same key always renders identically.
    """

    def __init__(self, labels: Sequence[str]):
        self.labels = tuple(labels)

    def ordered(self, combination: Iterable[str]) -> List[str]:
        combination = set(combination)
        known = [label for label in self.labels if label in combination]
        # Undeclared labels go last, alphabetically
        extra = sorted(combination.difference(self.labels))
        return known + extra

    def label_of(self, combination: Iterable[str]) -> str:
        return INTERSECTION_GLYPH.join(self.ordered(combination))

    def items_of(self, decomposition: RegionDecomposition, combination: Iterable[str]) -> List[str]:
        """
        Items of every region whose key contains `combination`.

        A single label yields the whole set including its overlaps; several
        labels yield their intersection. Unknown labels yield [].
        """
        wanted = frozenset(combination)
        if not wanted:
            return []

        items: List[str] = []
        seen: Set[str] = set()
        for key, region in decomposition.items():
            if not wanted <= key:
                continue
            for item in region:
                if item not in seen:
                    seen.add(item)
                    items.append(item)
        return items

    def exclusive_items(self, decomposition: RegionDecomposition, combination: Iterable[str]) -> List[str]:
        """Items of the region keyed exactly by `combination` (the "A only" wedge)."""
        return list(decomposition.get(frozenset(combination), []))

    def tooltip(
        self,
        decomposition: RegionDecomposition,
        combination: Iterable[str],
        exclusive: bool = False,
    ) -> str:
        combination = frozenset(combination)
        if exclusive:
            items = self.exclusive_items(decomposition, combination)
        else:
            items = self.items_of(decomposition, combination)
        body = ", ".join(items) if items else EMPTY_TEXT
        return f"{self.label_of(combination)}: {body}"
