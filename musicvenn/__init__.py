"""
Music Venn: overlap of your top artists/tracks with a country's and the
world's charts, drawn as a three-set Venn diagram you can zoom into by
dragging a rectangle over the circles.
"""

from musicvenn.geometry import CircleDescriptor, SelectionRectangle, labels_at, select_touched
from musicvenn.labels import RegionLabeler
from musicvenn.regions import NamedCollection, RegionDecomposition, aggregate
from musicvenn.session import SelectionSession, SelectionState

__version__ = "0.1.0"
