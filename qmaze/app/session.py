"""Mutable session record shared between the controller and renderers."""

from dataclasses import dataclass
from typing import Optional

from ..domain.errors import InvalidConfigurationError
from ..domain.types import AGENT_ICONS, AgentTag, Position


@dataclass
class SessionState:
    """Configuration and control flags the UI reads and writes between steps.

    ``awaiting_start_click`` and ``awaiting_goal_click`` are one-shot modes:
    at most one is armed, and the next cell selection consumes it.
    """
    start: Position
    goal: Position
    agent_tag: AgentTag = "robot"
    step_interval_ms: int = 500
    running: bool = False
    awaiting_start_click: bool = False
    awaiting_goal_click: bool = False

    @property
    def agent_icon(self) -> str:
        return AGENT_ICONS[self.agent_tag]

    @property
    def pending_edit(self) -> Optional[str]:
        """``"start"``, ``"goal"`` or None."""
        if self.awaiting_start_click:
            return "start"
        if self.awaiting_goal_click:
            return "goal"
        return None

    def arm_start_click(self):
        self.awaiting_start_click = True
        self.awaiting_goal_click = False

    def arm_goal_click(self):
        self.awaiting_goal_click = True
        self.awaiting_start_click = False

    def clear_pending_edit(self):
        self.awaiting_start_click = False
        self.awaiting_goal_click = False

    def set_step_interval(self, interval_ms: int):
        if interval_ms != int(interval_ms) or interval_ms <= 0:
            raise InvalidConfigurationError(
                f"step_interval_ms must be a positive whole number, got {interval_ms}"
            )
        self.step_interval_ms = int(interval_ms)

    def set_agent_tag(self, tag: str):
        if tag not in AGENT_ICONS:
            raise InvalidConfigurationError(f"Unknown agent tag '{tag}'")
        self.agent_tag = tag
