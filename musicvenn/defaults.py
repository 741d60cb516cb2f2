from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# Colors by declared label position (Personal, Country, World)
# ---------------------------------------------------------------------------

FILL_COLORS: List[str] = ["#7dc9ff", "#ffba7d", "#80ff80"]
OUTLINE_COLORS: List[str] = ["#004c83", "#803c00", "#007c00"]

# ---------------------------------------------------------------------------
# Sizes by number of circles drawn (1..3)
# ---------------------------------------------------------------------------

REGION_FONTSIZES: Dict[int, float] = {1: 16, 2: 14, 3: 12}
SET_LABEL_FONTSIZES: Dict[int, float] = {1: 20, 2: 20, 3: 18}
LINEWIDTHS: Dict[int, float] = {1: 3.0, 2: 2.5, 3: 2.0}


def _drawn(n: int) -> int:
    return max(1, min(3, n))


def default_palette(n_labels: int) -> Tuple[List[str], List[str]]:
    """(fill_colors, outline_colors), cycled when more labels are declared."""
    fills = [FILL_COLORS[i % len(FILL_COLORS)] for i in range(n_labels)]
    outlines = [OUTLINE_COLORS[i % len(OUTLINE_COLORS)] for i in range(n_labels)]
    return fills, outlines


def default_fontsizes(n_drawn: int) -> Tuple[float, float]:
    """(region_fontsize, set_label_fontsize) for n drawn circles."""
    n = _drawn(n_drawn)
    return REGION_FONTSIZES[n], SET_LABEL_FONTSIZES[n]


def default_linewidth(n_drawn: int) -> float:
    return LINEWIDTHS[_drawn(n_drawn)]
