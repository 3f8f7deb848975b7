"""
TileCanvasManager - seamless canvas growth

The canvas is a whole number of tiles. Half a tile outside each edge sits a
sentinel band; when the viewport reaches one, that edge grows by a tile
after a debounce. Growing the top or left edge moves every stroke down or
right by a tile and asks the view to scroll by the same amount, so nothing
appears to move on screen.
"""

import logging
import math
from typing import Dict, Optional, Set

from PyQt6.QtCore import QObject, pyqtSignal

from .debounce import Debouncer
from .path_store import PathStore
from .types import CanvasExtent, Edge, Viewport


logger = logging.getLogger(__name__)


def default_extent(viewport_width: float, viewport_height: float,
                   tile_size: int, margin_tiles: int = 4) -> CanvasExtent:
    """Initial canvas covering the viewport plus ``margin_tiles`` spare tiles per axis."""
    return CanvasExtent(
        tile_size * (math.ceil(viewport_width / tile_size) + margin_tiles),
        tile_size * (math.ceil(viewport_height / tile_size) + margin_tiles),
    )


def edges_near(viewport: Viewport, extent: CanvasExtent, band: float) -> Set[Edge]:
    """
    Edges whose sentinel band intersects the viewport.

    Sentinels are ``band`` deep and lie just outside the canvas, spanning the
    full padded width or height like the layout they stand in for.
    """
    near: Set[Edge] = set()

    spans_x = viewport.x < extent.width + band and viewport.right > -band
    spans_y = viewport.y < extent.height + band and viewport.bottom > -band

    if spans_x and viewport.y < 0 and viewport.bottom > -band:
        near.add(Edge.TOP)
    if spans_x and viewport.bottom > extent.height and viewport.y < extent.height + band:
        near.add(Edge.BOTTOM)
    if spans_y and viewport.x < 0 and viewport.right > -band:
        near.add(Edge.LEFT)
    if spans_y and viewport.right > extent.width and viewport.x < extent.width + band:
        near.add(Edge.RIGHT)

    return near


class TileCanvasManager(QObject):
    """
    Owns the canvas extent and grows it one tile at a time.

    Signals:
        extent_changed(width, height): after any growth
        scroll_requested(dx, dy): view must scroll to keep content still
        edge_grown(str): edge value after growth
    """

    extent_changed = pyqtSignal(int, int)
    scroll_requested = pyqtSignal(int, int)
    edge_grown = pyqtSignal(str)

    def __init__(self, store: PathStore, extent: CanvasExtent, tile_size: int,
                 debounce_ms: int = 500, parent: Optional[QObject] = None):
        super().__init__(parent)
        if extent.width <= 0 or extent.height <= 0:
            raise ValueError(f"Canvas extent must be positive: {extent}")
        if extent.width % tile_size or extent.height % tile_size:
            raise ValueError(f"Canvas extent {extent} is not a multiple of tile size {tile_size}")

        self._store = store
        self._extent = extent
        self._tile_size = tile_size
        self._near: Set[Edge] = set()
        self._debouncers: Dict[Edge, Debouncer] = {
            edge: Debouncer(debounce_ms, lambda e=edge: self.grow(e), self)
            for edge in Edge
        }

    @property
    def extent(self) -> CanvasExtent:
        return self._extent

    @property
    def tile_size(self) -> int:
        return self._tile_size

    @property
    def sentinel_size(self) -> float:
        return self._tile_size / 2

    def is_pending(self, edge: Edge) -> bool:
        return self._debouncers[edge].is_pending

    # ==================== Edge Signals ====================

    def update_viewport(self, viewport: Viewport) -> Set[Edge]:
        """
        Re-evaluate sentinels against the viewport.

        Only edges that just became near are signalled.

        Returns:
            Edges newly signalled by this update
        """
        near = edges_near(viewport, self._extent, self.sentinel_size)
        entered = near - self._near
        self._near = near
        for edge in entered:
            self.signal_edge(edge)
        return entered

    def signal_edge(self, edge: Edge):
        """An edge is near; grow it once things settle."""
        self._debouncers[edge].trigger()

    def flush(self):
        """Apply all pending growth immediately."""
        for debouncer in self._debouncers.values():
            debouncer.flush()

    def stop(self):
        for debouncer in self._debouncers.values():
            debouncer.cancel()

    # ==================== Growth ====================

    def grow(self, edge: Edge):
        """Add one tile on ``edge``."""
        tile = self._tile_size
        if edge in (Edge.TOP, Edge.BOTTOM):
            self._extent = CanvasExtent(self._extent.width, self._extent.height + tile)
        else:
            self._extent = CanvasExtent(self._extent.width + tile, self._extent.height)

        logger.debug(f"Canvas grew at {edge.value} to {self._extent.width}x{self._extent.height}")
        self.extent_changed.emit(self._extent.width, self._extent.height)

        if edge == Edge.TOP:
            self._store.shift(dy=tile)
            self.scroll_requested.emit(0, tile)
        elif edge == Edge.LEFT:
            self._store.shift(dx=tile)
            self.scroll_requested.emit(tile, 0)

        self.edge_grown.emit(edge.value)


__all__ = ['TileCanvasManager', 'default_extent', 'edges_near']
