"""Grid view for the Q-learning maze."""

from typing import Dict, Tuple

from PySide6.QtWidgets import QGraphicsView, QGraphicsScene
from PySide6.QtGui import QPainter
from PySide6.QtCore import Qt

from ..app.controller import MazeController
from .tiles import MazeTile


class GridView(QGraphicsView):
    """Graphics view that draws the maze and forwards cell clicks."""

    def __init__(self, controller: MazeController, tile_size: float = 56.0):
        super().__init__()

        self.controller = controller
        self.scene = QGraphicsScene()
        self.setScene(self.scene)

        self.tiles: Dict[Tuple[int, int], MazeTile] = {}
        self.tile_size = tile_size
        self._built_for = None

        self.setRenderHint(QPainter.Antialiasing)

        self.controller.grid_updated.connect(self.update_grid)
        self.update_grid()

    def update_grid(self):
        """Rebuild tiles for a new grid, otherwise just refresh them."""
        grid = self.controller.grid
        if self._built_for is not grid:
            self._rebuild(grid)
        self._refresh()

    def _rebuild(self, grid):
        self.scene.clear()
        self.tiles.clear()
        self.scene.setSceneRect(0, 0, grid.size * self.tile_size, grid.size * self.tile_size)

        for row in grid.rows():
            for cell in row:
                tile = MazeTile(cell, self.tile_size)
                self.scene.addItem(tile)
                self.tiles[tuple(cell.coord)] = tile
        self._built_for = grid

    def _refresh(self):
        grid = self.controller.grid
        q_table = self.controller.q_table
        agent_pos = tuple(self.controller.agent_position)
        agent_icon = self.controller.session.agent_icon

        for coord, tile in self.tiles.items():
            tile.update_appearance(
                q_table.values(coord),
                is_goal=coord == tuple(grid.goal),
                agent_icon=agent_icon if coord == agent_pos else "",
            )

    def mousePressEvent(self, event):
        """Forward left clicks on cells to the controller."""
        if event.button() == Qt.LeftButton:
            scene_pos = self.mapToScene(event.pos())
            x = int(scene_pos.x() // self.tile_size)
            y = int(scene_pos.y() // self.tile_size)

            grid = self.controller.grid
            if grid.in_bounds((x, y)):
                self.controller.handle_cell_click((x, y))

        super().mousePressEvent(event)

    def fit_in_view(self):
        """Fit the entire grid in the view."""
        if self.scene.items():
            self.fitInView(self.scene.itemsBoundingRect(), Qt.KeepAspectRatio)
