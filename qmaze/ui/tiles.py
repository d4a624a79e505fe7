"""Grid tiles for Q-learning maze visualization."""

from typing import Dict

from PySide6.QtWidgets import QGraphicsRectItem, QGraphicsTextItem
from PySide6.QtGui import QBrush, QPen, QColor, QFont

from ..domain.types import ACTIONS, Cell

# Text arrows drawn for actions with positive estimates
ACTION_ARROWS = {"up": "▲", "down": "▼", "left": "◀", "right": "▶"}

GOAL_ICON = "\U0001F3AF"

# Q-value at which the overlay reaches full intensity
Q_OVERLAY_SCALE = 100.0


def overlay_alpha(max_q: float) -> int:
    """Alpha (0-255) of the blue value overlay: ``max_q / 100 * 0.5``, clamped."""
    opacity = max(0.0, min(max_q / Q_OVERLAY_SCALE * 0.5, 0.5))
    return int(255 * opacity)


class MazeTile(QGraphicsRectItem):
    """Graphics item for one maze cell with its learned values."""

    def __init__(self, cell: Cell, size: float):
        super().__init__(0, 0, size, size)
        self.cell = cell
        self.size = size

        x, y = cell.coord
        self.setPos(x * size, y * size)

        self._icon_text = QGraphicsTextItem(parent=self)
        self._icon_text.setFont(QFont("Arial", int(size * 0.4)))
        self._arrow_texts: Dict[str, QGraphicsTextItem] = {}
        self._setup_arrows()

    def _setup_arrows(self):
        """Small arrows along the bottom-right edge, one per action."""
        small_font = QFont("Arial", max(int(self.size * 0.12), 6))
        for index, action in enumerate(ACTIONS):
            text_item = QGraphicsTextItem(ACTION_ARROWS[action], parent=self)
            text_item.setFont(small_font)
            text_item.setDefaultTextColor(QColor(147, 197, 253))
            text_item.setPos(self.size * (0.45 + 0.13 * index), self.size * 0.68)
            text_item.setVisible(False)
            self._arrow_texts[action] = text_item

    def update_appearance(self, q_values: Dict[str, float], is_goal: bool, agent_icon: str = ""):
        """Refresh colours, icons and arrows."""
        if self.cell.is_wall:
            brush = QColor(17, 24, 39)
        elif is_goal:
            brush = QColor(20, 83, 45)
        else:
            brush = QColor(55, 65, 81)
            max_q = max(q_values.values()) if q_values else 0.0
            alpha = overlay_alpha(max_q)
            if alpha > 0:
                brush = self._blend(brush, QColor(59, 130, 246), alpha / 255.0)

        self.setBrush(QBrush(brush))
        self.setPen(QPen(QColor(31, 41, 55), 1))

        icon = agent_icon or (GOAL_ICON if is_goal else "")
        self._icon_text.setPlainText(icon)
        self._icon_text.setVisible(bool(icon))
        if icon:
            rect = self._icon_text.boundingRect()
            self._icon_text.setPos((self.size - rect.width()) / 2, (self.size - rect.height()) / 2)

        show_arrows = not self.cell.is_wall and not is_goal and not agent_icon
        for action, text_item in self._arrow_texts.items():
            text_item.setVisible(show_arrows and q_values.get(action, 0.0) > 0)

    @staticmethod
    def _blend(base: QColor, overlay: QColor, amount: float) -> QColor:
        return QColor(
            int(base.red() + (overlay.red() - base.red()) * amount),
            int(base.green() + (overlay.green() - base.green()) * amount),
            int(base.blue() + (overlay.blue() - base.blue()) * amount),
        )
