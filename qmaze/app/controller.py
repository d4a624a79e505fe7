"""Application controller connecting the UI to the Q-learning domain."""

import logging
from dataclasses import fields, replace
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from ..domain.errors import AgentTrappedError, InvalidConfigurationError, MazeError
from ..domain.gridworld import GridWorld
from ..domain.learner import QLearner
from ..domain.qtable import QTable
from ..domain.types import Coord, MazeConfig, Position
from ..utils.grid_factory import default_endpoints, generate_grid_world
from ..utils.rng import SeededRNG
from .session import SessionState

logger = logging.getLogger(__name__)

# Fields update_config may change on a live maze; the rest need new_maze
TUNABLE_FIELDS = frozenset({
    "learning_rate", "discount_factor", "epsilon", "epsilon_decay", "epsilon_min",
    "relocated_reward_goal", "relocated_reward_step", "step_interval_ms",
})


class MazeController(QObject):
    """
    Controller that schedules learner steps and routes UI edits to the domain.

    Steps are driven by a single-shot QTimer that is re-armed only after the
    previous step has finished, so steps never overlap. A new step interval
    applies from the next re-arm; stopping cancels the pending tick.

    Signals:
        state_changed: Emitted with the running flag when training starts or stops
        step_completed: Emitted with the Transition of every step
        episode_completed: Emitted with the episode count when the goal is reached
        grid_updated: Emitted when the grid needs to be redrawn
        session_changed: Emitted when start, goal, interval or agent tag change
        error_occurred: Emitted when an error occurs
    """

    # Qt Signals
    state_changed = Signal(bool)
    step_completed = Signal(object)  # Transition
    episode_completed = Signal(int)
    grid_updated = Signal()
    session_changed = Signal()
    error_occurred = Signal(str)

    def __init__(self, config: Optional[MazeConfig] = None, grid: Optional[GridWorld] = None,
                 start: Optional[Coord] = None, parent: Optional[QObject] = None):
        super().__init__(parent)

        self._config = config if config is not None else MazeConfig()
        self._config.validate()
        self._rng = SeededRNG(self._config.seed)

        if grid is None:
            default_start, _ = default_endpoints(self._config.grid_size)
            start = start if start is not None else default_start
            grid = generate_grid_world(self._config, start=start, rng=self._rng)
        elif start is None:
            start = default_endpoints(grid.size)[0]

        self._config.grid_size = grid.size
        self._learner = QLearner(grid, self._config, start, rng=self._rng)
        self._sync_grid_rewards()
        self._session = SessionState(
            start=self._learner.start_position,
            goal=grid.goal,
            step_interval_ms=int(self._config.step_interval_ms),
        )

        # Single-shot timer re-armed after each completed step
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timer_tick)

    # Properties

    @property
    def config(self) -> MazeConfig:
        return self._config

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def learner(self) -> QLearner:
        return self._learner

    @property
    def grid(self) -> GridWorld:
        return self._learner.grid

    @property
    def q_table(self) -> QTable:
        return self._learner.q_table

    @property
    def is_running(self) -> bool:
        return self._learner.is_running

    @property
    def agent_position(self) -> Position:
        return self._learner.agent.position

    # Training control

    def start_training(self) -> bool:
        """Start periodic training. Returns False if already running."""
        if not self._learner.start():
            return False
        self._session.running = True
        self._timer.start(self._session.step_interval_ms)
        self.state_changed.emit(True)
        return True

    def stop_training(self) -> bool:
        """Stop training and cancel the pending tick. Returns False if already idle."""
        self._timer.stop()
        changed = self._learner.stop()
        self._sync_stopped(changed)
        return changed

    def toggle_training(self) -> bool:
        """Flip between training and idle. Returns the new running flag."""
        if self._learner.is_running:
            self.stop_training()
        else:
            self.start_training()
        return self._learner.is_running

    def _sync_stopped(self, emit: bool = True):
        self._session.running = False
        if emit:
            self.state_changed.emit(False)

    def step_once(self) -> bool:
        """Run a single step outside the timer (training must be running)."""
        return self._run_step()

    # Configuration

    def set_step_interval(self, interval_ms: int) -> bool:
        """Change the step interval; the pending tick keeps its old deadline."""
        try:
            self._session.set_step_interval(interval_ms)
        except MazeError as e:
            self.error_occurred.emit(f"Invalid step interval: {e}")
            return False
        self._config.step_interval_ms = self._session.step_interval_ms
        self.session_changed.emit()
        return True

    def set_agent_tag(self, tag: str) -> bool:
        """Choose the agent's cosmetic identity."""
        try:
            self._session.set_agent_tag(tag)
        except MazeError as e:
            self.error_occurred.emit(str(e))
            return False
        self.session_changed.emit()
        self.grid_updated.emit()
        return True

    def update_config(self, **kwargs) -> bool:
        """
        Update learning parameters such as epsilon, learning_rate or discount_factor.

        Keys that are not config fields are ignored. Grid size, wall probability,
        generation rewards and seed shape the maze itself and are rejected here;
        use ``new_maze`` for those. Nothing changes if the result would be invalid.
        """
        known = {f.name for f in fields(MazeConfig)}
        changes = {key: value for key, value in kwargs.items() if key in known}
        try:
            structural = sorted(set(changes) - TUNABLE_FIELDS)
            if structural:
                raise InvalidConfigurationError(
                    f"{', '.join(structural)} cannot change on a live maze; generate a new maze instead"
                )
            replace(self._config, **changes).validate()
        except MazeError as e:
            self.error_occurred.emit(f"Invalid configuration: {e}")
            return False

        for key, value in changes.items():
            setattr(self._config, key, value)

        if "epsilon" in changes:
            self._learner.epsilon = self._config.epsilon
        if "step_interval_ms" in changes:
            self._session.set_step_interval(self._config.step_interval_ms)
            self._config.step_interval_ms = self._session.step_interval_ms
        self._sync_grid_rewards()
        self.session_changed.emit()
        return True

    def _sync_grid_rewards(self):
        grid = self._learner.grid
        grid.relocated_reward_goal = self._config.relocated_reward_goal
        grid.relocated_reward_step = self._config.relocated_reward_step

    # Start / goal editing

    def arm_start_relocation(self):
        """The next cell click moves the start."""
        self._session.arm_start_click()
        self.session_changed.emit()

    def arm_goal_relocation(self):
        """The next cell click moves the goal."""
        self._session.arm_goal_click()
        self.session_changed.emit()

    def handle_cell_click(self, coord: Coord) -> bool:
        """
        Deliver a grid-cell selection.

        Consumes an armed start/goal mode; does nothing when no mode is armed.
        Returns True if the start or goal moved.
        """
        mode = self._session.pending_edit
        if mode is None:
            return False

        self._session.clear_pending_edit()
        if mode == "start":
            moved = self.relocate_start(coord)
        else:
            moved = self.relocate_goal(coord)
        if not moved:
            self.session_changed.emit()
        return moved

    def relocate_start(self, coord: Coord) -> bool:
        """Move start and agent. Rejected (False) on walls and the goal. Training keeps running."""
        try:
            moved = self._learner.relocate_start(coord)
        except MazeError as e:
            self.error_occurred.emit(f"Failed to set start: {e}")
            return False
        if not moved:
            logger.info("Start relocation to %s rejected: cell is a wall or the goal", tuple(coord))
            return False

        self._session.start = self._learner.start_position
        self.session_changed.emit()
        self.grid_updated.emit()
        return True

    def relocate_goal(self, coord: Coord) -> bool:
        """Move the goal and rewrite rewards. Rejected (False) on the start. Training keeps running."""
        try:
            moved = self._learner.relocate_goal(coord)
        except MazeError as e:
            self.error_occurred.emit(f"Failed to set goal: {e}")
            return False
        if not moved:
            logger.info("Goal relocation to %s rejected: cell is the start", tuple(coord))
            return False

        self._session.goal = self._learner.goal
        self.session_changed.emit()
        self.grid_updated.emit()
        return True

    # Grid management

    def new_maze(self, size: Optional[int] = None, wall_probability: Optional[float] = None,
                 seed: Optional[int] = None) -> bool:
        """Generate a fresh random maze and forget everything learned."""
        changes = {}
        if size is not None:
            changes["grid_size"] = size
        if wall_probability is not None:
            changes["wall_probability"] = wall_probability
        try:
            candidate = replace(self._config, **changes)
            candidate.validate()
        except MazeError as e:
            self.error_occurred.emit(f"Failed to generate maze: {e}")
            return False

        self.stop_training()
        for key, value in changes.items():
            setattr(self._config, key, value)
        if seed is not None:
            self._rng.set_seed(seed)

        start, goal = default_endpoints(self._config.grid_size)
        grid = generate_grid_world(self._config, start=start, goal=goal, rng=self._rng)
        self._learner = QLearner(grid, self._config, start, rng=self._rng)
        self._session.start = start
        self._session.goal = goal
        self._session.clear_pending_edit()
        logger.info("Generated %dx%d maze with %d walls", grid.size, grid.size, grid.wall_count())

        self.session_changed.emit()
        self.grid_updated.emit()
        return True

    def reset_learning(self):
        """Zero the Q-table and counters; the maze stays as it is."""
        self._learner.reset_learning()
        self.grid_updated.emit()

    # Timer callbacks

    def _on_timer_tick(self):
        """Called when the single-shot timer fires."""
        if self._run_step() and self._learner.is_running:
            self._timer.start(self._session.step_interval_ms)

    def _run_step(self) -> bool:
        if not self._learner.is_running:
            return False

        try:
            transition = self._learner.step()
        except AgentTrappedError as e:
            # The learner has already gone idle
            self._timer.stop()
            self._sync_stopped()
            self.error_occurred.emit(str(e))
            return False
        except MazeError as e:
            logger.error("Training step failed: %s", e)
            self.stop_training()
            self.error_occurred.emit(f"Training step failed: {e}")
            return False

        if transition is None:
            return False

        self.step_completed.emit(transition)
        if transition.episode_completed:
            logger.info("Episode %d complete", self._learner.stats.episode_count)
            self.episode_completed.emit(self._learner.stats.episode_count)
        self.grid_updated.emit()
        return True

    # Utility methods

    def cleanup(self):
        """Stop the timer before shutdown."""
        self._timer.stop()
        if self._learner.is_running:
            self._learner.stop()
            self._session.running = False

    def get_statistics(self) -> dict:
        """Get current learning statistics."""
        stats = self._learner.stats
        agent = self._learner.agent
        return {
            "episode_count": stats.episode_count,
            "total_reward": stats.total_reward,
            "episode_reward": stats.episode_reward,
            "episode_steps": stats.episode_steps,
            "last_episode_reward": stats.last_episode_reward,
            "last_episode_steps": stats.last_episode_steps,
            "epsilon": self._learner.epsilon,
            "agent_position": tuple(agent.position),
            "last_action": agent.last_action,
            "last_reward": agent.last_reward,
            "running": self._learner.is_running,
            "state_description": self._learner.describe_state(),
        }
