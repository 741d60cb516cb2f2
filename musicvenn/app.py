"""
Interactive Matplotlib front end.

Layout: controls on the left (kind, display count, country, reset), the
Venn axes in the middle, the three ranked lists on the right and a status
line at the bottom that shows the tooltip for the region under the pointer.
Dragging a rectangle over the circles zooms into the touched sets; a drag
that touches nothing (or the Reset button) returns to the full view.

Provider calls run on one asyncio event loop owned by the app; widget
callbacks drive it with run_until_complete.
"""
import asyncio
import logging
from typing import Callable, Dict, Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.widgets import Button, RadioButtons, RectangleSelector

from musicvenn.chart import ChartStyle, VennChart
from musicvenn.config import COUNT_CHOICES, COUNTRIES, DEFAULT_COUNT, DEFAULT_COUNTRY, DEFAULT_KIND, KINDS, LABELS
from musicvenn.errors import RenderSurfaceMissing
from musicvenn.geometry import SelectionRectangle
from musicvenn.rankings import RankingStore
from musicvenn.session import SelectionSession

logger = logging.getLogger(__name__)


class MusicVennApp:

    def __init__(
        self,
        store: RankingStore,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        countries: Sequence[str] = COUNTRIES,
        style: Optional[ChartStyle] = None,
    ):
        self.store = store
        self.loop = loop or asyncio.new_event_loop()
        self.countries = list(countries)
        if store.country not in self.countries:
            self.countries.insert(0, store.country)

        # ---- Figure and axes -----------------------------------------------
        self.fig = plt.figure(figsize=(14, 8))
        self.ax_venn = self.fig.add_axes([0.26, 0.10, 0.46, 0.82])
        self.ax_lists: Dict[str, plt.Axes] = {
            label: self.fig.add_axes([0.75, 0.66 - i * 0.31, 0.23, 0.27])
            for i, label in enumerate(LABELS)
        }
        self.status = self.fig.text(0.49, 0.03, "", ha="center", va="center", fontsize=10, wrap=True)

        self.chart = VennChart(self.ax_venn, LABELS, style)
        self.session = SelectionSession(LABELS, self.chart, style)
        self._selector: Optional[RectangleSelector] = None

        # ---- Controls ------------------------------------------------------
        ax_kind = self.fig.add_axes([0.02, 0.80, 0.18, 0.12])
        ax_kind.set_title("Type", fontsize=10)
        self.kind_radio = RadioButtons(ax_kind, KINDS, active=KINDS.index(store.kind))
        self.kind_radio.on_clicked(self._on_kind)

        count_choices = [str(c) for c in COUNT_CHOICES]
        ax_count = self.fig.add_axes([0.02, 0.58, 0.18, 0.17])
        ax_count.set_title("Number", fontsize=10)
        self.count_radio = RadioButtons(
            ax_count,
            count_choices,
            active=count_choices.index(str(store.count)) if str(store.count) in count_choices else 0,
        )
        self.count_radio.on_clicked(self._on_count)

        ax_country = self.fig.add_axes([0.02, 0.14, 0.18, 0.39])
        ax_country.set_title("Country", fontsize=10)
        self.country_radio = RadioButtons(ax_country, self.countries, active=self.countries.index(store.country))
        self.country_radio.on_clicked(self._on_country)

        ax_reset = self.fig.add_axes([0.02, 0.04, 0.18, 0.06])
        self.reset_button = Button(ax_reset, "Reset")
        self.reset_button.on_clicked(self._on_reset)

        self.fig.canvas.mpl_connect("motion_notify_event", self._on_hover)

    # ---- Lifecycle -----------------------------------------------------------

    def run(self) -> None:
        self._run(self._reload())
        plt.show()

    def _run(self, coro):
        return self.loop.run_until_complete(coro)

    async def _reload(self) -> None:
        collections = await self.store.collections()
        self._guarded(lambda: self.session.load(collections))

    def _guarded(self, action: Callable[[], object]) -> None:
        """Run a session transition, then refresh everything drawn around it."""
        try:
            action()
        except RenderSurfaceMissing as exc:
            logger.error("Redraw aborted: %s", exc)
        self._install_selector()
        self._draw_lists()
        self.fig.canvas.draw_idle()

    def _install_selector(self) -> None:
        # The chart clears its axes on every redraw, which drops the old selector's artists
        if self._selector is not None:
            self._selector.set_active(False)
            self._selector.disconnect_events()
        self._selector = RectangleSelector(
            self.ax_venn,
            self._on_select,
            useblit=False,
            button=[1],
            # negative spans so clicks and flat drags still reach onselect
            minspanx=-1,
            minspany=-1,
            spancoords="data",
            interactive=False,
            props=dict(facecolor="black", edgecolor="black", alpha=0.1, linestyle="--", fill=True),
        )

    def _draw_lists(self) -> None:
        titles = self.store.list_titles()
        for label, ax in self.ax_lists.items():
            ax.clear()
            ax.set_axis_off()
            ax.set_title(titles[label], fontsize=11, loc="left")
            names = self.store.current(label)
            lines = [f"{i + 1}. {name}" for i, name in enumerate(names)] or ["(none)"]
            ax.text(0.0, 1.0, "\n".join(lines), va="top", ha="left", fontsize=9, transform=ax.transAxes)

    def _set_radio(self, radio: RadioButtons, index: int) -> None:
        radio.eventson = False
        radio.set_active(index)
        radio.eventson = True

    # ---- Callbacks -----------------------------------------------------------

    def _on_select(self, eclick, erelease) -> None:
        if None in (eclick.xdata, eclick.ydata, erelease.xdata, erelease.ydata):
            return
        rect = SelectionRectangle.from_drag(eclick.xdata, eclick.ydata, erelease.xdata, erelease.ydata)
        self._guarded(lambda: self.session.select(rect))

    def _on_kind(self, label: str) -> None:
        self.store.set_kind(label)
        self._run(self._reload())

    def _on_count(self, label: str) -> None:
        self.store.set_count(int(label))
        self._run(self._reload())

    def _on_country(self, label: str) -> None:
        async def change():
            self.store.refresh_country(label)
            await self._reload()

        self._run(change())

    def _on_reset(self, _event) -> None:
        async def reset():
            self.store.reset_controls()
            collections = await self.store.collections()

            def full_view():
                self.session.load(collections)
                self.session.reset()

            self._guarded(full_view)

        self._set_radio(self.kind_radio, KINDS.index(DEFAULT_KIND))
        self._set_radio(self.count_radio, [str(c) for c in COUNT_CHOICES].index(str(DEFAULT_COUNT)))
        if DEFAULT_COUNTRY in self.countries:
            self._set_radio(self.country_radio, self.countries.index(DEFAULT_COUNTRY))
        self._run(reset())

    def _on_hover(self, event) -> None:
        text = ""
        if event.inaxes is self.ax_venn and event.xdata is not None:
            text = self.session.tooltip_at(event.xdata, event.ydata) or ""
        if text != self.status.get_text():
            self.status.set_text(text)
            self.fig.canvas.draw_idle()
