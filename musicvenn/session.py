"""
Selection session: the Full / Restricted state machine behind drag-to-zoom.

The session owns the ActiveLabelSet, the current NamedCollections, the
decomposition drawn for them and the circles the chart reported back.
Every transition re-aggregates over the active labels and redraws; the new
state is committed only once the chart has drawn it.
"""
import enum
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

from musicvenn.chart import ZOOMED_TITLE, ChartAdapter, ChartStyle
from musicvenn.config import LABELS
from musicvenn.geometry import CircleDescriptor, SelectionRectangle, labels_at, select_touched
from musicvenn.labels import RegionLabeler
from musicvenn.regions import NamedCollection, RegionDecomposition, aggregate

logger = logging.getLogger(__name__)


class SelectionState(enum.Enum):
    FULL = "full"
    RESTRICTED = "restricted"


class SelectionSession:

    def __init__(
        self,
        labels: Sequence[str] = LABELS,
        chart: Optional[ChartAdapter] = None,
        style: Optional[ChartStyle] = None,
    ):
        if not labels:
            raise ValueError("At least one label must be declared.")
        if len(set(labels)) != len(labels):
            raise ValueError(f"Labels must be distinct, got {list(labels)}.")

        self.labels = tuple(labels)
        self.labeler = RegionLabeler(self.labels)
        self._chart = chart
        self._style = style
        self._rendered = False

        self._collections: Dict[str, NamedCollection] = {}
        self._active: FrozenSet[str] = frozenset(self.labels)
        self._decomposition: RegionDecomposition = {}
        self._circles: List[CircleDescriptor] = []

    # ---- Read-only views -----------------------------------------------------

    @property
    def active_labels(self) -> FrozenSet[str]:
        return self._active

    @property
    def state(self) -> SelectionState:
        if self._active == frozenset(self.labels):
            return SelectionState.FULL
        return SelectionState.RESTRICTED

    @property
    def decomposition(self) -> RegionDecomposition:
        return {key: list(items) for key, items in self._decomposition.items()}

    @property
    def circles(self) -> List[CircleDescriptor]:
        return list(self._circles)

    @property
    def collections(self) -> List[NamedCollection]:
        return [self._collections[label] for label in self.labels if label in self._collections]

    # ---- Transitions ---------------------------------------------------------

    def load(self, collections: Iterable[NamedCollection]) -> None:
        """
        Replace the collections wholesale and re-aggregate. The active labels
        survive a data refresh; a Restricted session stays Restricted.
        """
        incoming = {}
        for collection in collections:
            if collection.label not in self.labels:
                raise ValueError(f"Unknown label {collection.label!r}; declared: {self.labels}.")
            incoming[collection.label] = collection

        previous = self._collections
        self._collections = incoming
        try:
            self._refresh(self._active)
        except Exception:
            self._collections = previous
            raise

    def select(self, rect: SelectionRectangle) -> FrozenSet[str]:
        """
        Apply a drawn rectangle. Touched labels restrict the view; an empty
        selection reverts to the full view. Returns the touched labels.
        """
        touched = frozenset(select_touched(self._circles, rect))
        if not touched:
            logger.info("Selection touched no circle; reverting to full view.")
            self.reset()
        elif touched != self._active:
            self.restrict(touched)
        return touched

    def restrict(self, labels: Iterable[str]) -> None:
        labels = frozenset(labels)
        if not labels:
            raise ValueError("Cannot restrict to an empty label set; use reset().")
        unknown = labels.difference(self.labels)
        if unknown:
            raise ValueError(f"Unknown label(s): {sorted(unknown)}.")
        self._refresh(labels)

    def reset(self) -> None:
        self._refresh(frozenset(self.labels))

    # ---- Tooltips --------------------------------------------------------------

    def items_of(self, combination: Iterable[str]) -> List[str]:
        return self.labeler.items_of(self._decomposition, combination)

    def tooltip(self, combination: Iterable[str], exclusive: bool = False) -> str:
        return self.labeler.tooltip(self._decomposition, combination, exclusive=exclusive)

    def tooltip_at(self, x: float, y: float) -> Optional[str]:
        """Tooltip for the region under (x, y), or None outside every circle."""
        combination = labels_at(self._circles, x, y)
        if not combination:
            return None
        return self.tooltip(combination)

    # ---------------------------------------------------------------------------

    def _refresh(self, active: FrozenSet[str]) -> None:
        collections = [
            self._collections[label]
            for label in self.labels
            if label in active and label in self._collections
        ]
        decomposition = aggregate(collections)
        circles = self._draw(decomposition, active)

        before = self.state
        self._active = active
        self._decomposition = decomposition
        self._circles = circles
        logger.info(
            "Session %s -> %s (%s), %d region(s).",
            before.value,
            self.state.value,
            self.labeler.label_of(active),
            len(decomposition),
        )

    def _draw(self, decomposition: RegionDecomposition, active: FrozenSet[str]) -> List[CircleDescriptor]:
        if self._chart is None:
            return []
        restricted = active != frozenset(self.labels)
        if self._rendered:
            return self._chart.update(decomposition, title=ZOOMED_TITLE if restricted else None)

        circles = self._chart.render(decomposition, self._style)
        self._rendered = True
        if restricted:
            circles = self._chart.update(decomposition, title=ZOOMED_TITLE)
        return circles
