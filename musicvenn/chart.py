"""
Venn chart drawing on Matplotlib axes.

Draws one plain circle, or two/three circles via matplotlib-venn, sized by a
region decomposition. Colors are tied to the label's declared position, so a
label keeps its circle color across redraws and zooms.

This module exposes:

- VennChart: stateful adapter bound to one Axes (render / update / save)
- draw_venn(...): one-shot plotting function, optionally saving to a file
"""
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Union

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle
from matplotlib_venn import venn2, venn2_circles, venn3, venn3_circles

from musicvenn.colors import _hex, _rgb, region_color, resolve_color_mixing, text_color_for
from musicvenn.config import LABELS
from musicvenn.defaults import default_fontsizes, default_linewidth, default_palette
from musicvenn.errors import RenderSurfaceMissing
from musicvenn.geometry import CircleDescriptor
from musicvenn.regions import (
    RegionDecomposition,
    all_combinations,
    combination_bits,
    present_labels,
    subset_sizes,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Music Venn Diagram"
ZOOMED_TITLE = "Music (Zoomed)"

# Radius of a unit-area circle, matching matplotlib-venn's normalize_to=1.0
_SINGLE_RADIUS = float(np.sqrt(1.0 / np.pi))


@dataclass(frozen=True)
class ChartStyle:
    colors: Optional[Sequence[Union[str, tuple]]] = None
    outline_colors: Optional[Sequence[Union[str, tuple]]] = None
    color_mixing: Union[str, Callable] = "alpha_stack"
    text_color: Optional[str] = None
    region_label_fontsize: Optional[float] = None
    set_label_fontsize: Optional[float] = None
    linewidth: Optional[float] = None
    title: Optional[str] = DEFAULT_TITLE
    show_counts: bool = True


class ChartAdapter(Protocol):
    def render(self, decomposition: RegionDecomposition, style: Optional[ChartStyle] = None) -> List[CircleDescriptor]:
        ...

    def update(self, decomposition: RegionDecomposition, title: Optional[str] = None) -> List[CircleDescriptor]:
        ...


class VennChart:
    """
    Draws decompositions over `labels` (declared order) onto `ax`.

    Both render() and update() redraw in place and return the circles' data
    coordinates; the drag rectangle must be built in the same coordinates.
    """

    def __init__(self, ax: Optional[Axes], labels: Sequence[str] = LABELS, style: Optional[ChartStyle] = None):
        self.ax = ax
        self.labels = tuple(labels)
        self.circles: List[CircleDescriptor] = []
        self._apply_style(style or ChartStyle())

    def _apply_style(self, style: ChartStyle) -> None:
        self.style = style
        N = len(self.labels)
        default_fills, default_outlines = default_palette(N)
        fills = self.style.colors or default_fills
        outlines = self.style.outline_colors or default_outlines
        self._fill_rgbs: Dict[str, np.ndarray] = {
            label: _rgb(fills[i % len(fills)]) for i, label in enumerate(self.labels)
        }
        self._line_colors: Dict[str, Union[str, tuple]] = {
            label: outlines[i % len(outlines)] for i, label in enumerate(self.labels)
        }
        self._mixing_cb = resolve_color_mixing(self.style.color_mixing, N)

    def render(self, decomposition: RegionDecomposition, style: Optional[ChartStyle] = None) -> List[CircleDescriptor]:
        if style is not None and style != self.style:
            self._apply_style(style)
        return self._draw(decomposition, self.style.title)

    def update(self, decomposition: RegionDecomposition, title: Optional[str] = None) -> List[CircleDescriptor]:
        return self._draw(decomposition, title if title is not None else self.style.title)

    def save(self, outfile: str, dpi: Optional[int] = None) -> None:
        fig = self._figure()
        fig.savefig(outfile, dpi=dpi, bbox_inches="tight")
        logger.info("Saved chart to %s.", outfile)

    # -----------------------------------------------------------------------

    def _figure(self) -> Figure:
        if self.ax is None or self.ax.figure is None:
            raise RenderSurfaceMissing("No axes to draw the Venn chart on.")
        return self.ax.figure

    def _draw(self, decomposition: RegionDecomposition, title: Optional[str]) -> List[CircleDescriptor]:
        fig = self._figure()
        ax = self.ax
        ax.clear()

        layout = present_labels(decomposition, self.labels)
        n_drawn = len(layout)

        if n_drawn == 0:
            circles = []
            ax.set_axis_off()
        elif n_drawn == 1:
            circles = self._draw_single(decomposition, layout[0])
        elif n_drawn <= 3:
            circles = self._draw_venn(decomposition, layout)
        else:
            raise ValueError(f"At most 3 sets can be drawn, got {n_drawn}.")

        if title:
            ax.set_title(title)
        fig.canvas.draw_idle()

        self.circles = circles
        logger.debug("Drew %d circle(s): %s", len(circles), ", ".join(layout))
        return circles

    def _draw_single(self, decomposition: RegionDecomposition, label: str) -> List[CircleDescriptor]:
        ax = self.ax
        region_fs, set_fs = default_fontsizes(1)
        linewidth = self.style.linewidth or default_linewidth(1)
        rgb = self._fill_rgbs[label]

        ax.add_patch(Circle((0.0, 0.0), _SINGLE_RADIUS, facecolor=_hex(rgb), edgecolor="none", zorder=1))
        ax.add_patch(
            Circle(
                (0.0, 0.0),
                _SINGLE_RADIUS,
                fill=False,
                edgecolor=self._line_colors[label],
                linewidth=linewidth,
                zorder=4,
            )
        )
        if self.style.show_counts:
            ax.text(
                0.0,
                0.0,
                str(len(decomposition.get(frozenset([label]), []))),
                ha="center",
                va="center",
                fontsize=self.style.region_label_fontsize or region_fs,
                color=self.style.text_color or text_color_for(rgb),
                zorder=5,
            )
        ax.text(
            0.0,
            -_SINGLE_RADIUS * 1.15,
            label,
            ha="center",
            va="top",
            fontsize=self.style.set_label_fontsize or set_fs,
            color=self._line_colors[label],
            fontweight="bold",
            zorder=6,
        )

        lim = _SINGLE_RADIUS * 1.4
        ax.set_xlim(-lim, lim)
        ax.set_ylim(-lim, lim)
        ax.set_aspect("equal")
        ax.set_axis_off()
        return [CircleDescriptor(label, 0.0, 0.0, _SINGLE_RADIUS)]

    def _draw_venn(self, decomposition: RegionDecomposition, layout: List[str]) -> List[CircleDescriptor]:
        ax = self.ax
        N = len(layout)
        sizes = subset_sizes(decomposition, layout)
        region_fs, set_fs = default_fontsizes(N)
        linewidth = self.style.linewidth or default_linewidth(N)

        venn_fn, circles_fn = (venn2, venn2_circles) if N == 2 else (venn3, venn3_circles)
        diagram = venn_fn(
            subsets=sizes,
            set_labels=tuple(layout),
            set_colors=tuple(_hex(self._fill_rgbs[label]) for label in layout),
            alpha=1.0,
            ax=ax,
        )
        patches = circles_fn(subsets=sizes, linewidth=linewidth, ax=ax)

        # ---- Region fills & count labels ---------------------------------
        for key in all_combinations(layout):
            region_id = "".join(str(bit) for bit in combination_bits(key, layout))
            patch = diagram.get_patch_by_id(region_id)
            text = diagram.get_label_by_id(region_id)

            mixed_rgb = region_color(self._fill_rgbs, key, layout, self._mixing_cb)

            if patch is not None:
                patch.set_facecolor(_hex(mixed_rgb))
                patch.set_alpha(1.0)
            if text is not None:
                if self.style.show_counts:
                    text.set_fontsize(self.style.region_label_fontsize or region_fs)
                    text.set_color(self.style.text_color or text_color_for(mixed_rgb))
                else:
                    text.set_text("")

        # ---- Outlines & set labels ----------------------------------------
        for label, circle in zip(layout, patches):
            circle.set_edgecolor(self._line_colors[label])
        for label, text in zip(layout, diagram.set_labels or []):
            if text is not None:
                text.set_fontsize(self.style.set_label_fontsize or set_fs)
                text.set_color(self._line_colors[label])
                text.set_fontweight("bold")

        return [
            CircleDescriptor(
                label=label,
                center_x=float(circle.center[0]),
                center_y=float(circle.center[1]),
                radius=float(circle.radius),
            )
            for label, circle in zip(layout, patches)
        ]


def draw_venn(
    decomposition: RegionDecomposition,
    labels: Sequence[str] = LABELS,
    style: Optional[ChartStyle] = None,
    title: Optional[str] = None,
    outfile: Optional[str] = None,
    dpi: Optional[int] = None,
) -> Optional[Figure]:
    """
    Draw `decomposition` on a fresh figure.

    With `outfile` the figure is saved and closed and None is returned;
    otherwise the Figure is returned.
    """
    style = style or ChartStyle()
    if title is not None:
        style = replace(style, title=title)

    fig, ax = plt.subplots(figsize=(8, 8))
    chart = VennChart(ax, labels, style)
    chart.render(decomposition)

    if outfile:
        chart.save(outfile, dpi=dpi)
        plt.close(fig)
        return None

    return fig
