"""Q-Learning agent: Bellman updates and episode control."""

import logging
from typing import List, Optional, Tuple

from .fsm import LearnerStateMachine, LearnerState
from ..utils.rng import SeededRNG
from .errors import AgentTrappedError, OutOfBoundsError
from .gridworld import GridWorld
from .policy import EpsilonGreedyPolicy
from .qtable import QTable
from .types import (
    AgentRuntimeState, EpisodeResult, EpisodeStats, MazeConfig, Position, Transition
)

logger = logging.getLogger(__name__)


class QLearner:
    """Tabular Q-learning agent that advances one step per ``step()`` call.

    The learner is either RUNNING or IDLE. While idle ``step()`` does nothing;
    while running every call performs exactly one transition. A step that
    finds the agent on the goal closes the episode and sends the agent back
    to the start without touching the Q-table.
    """

    def __init__(self, grid: GridWorld, config: MazeConfig, start: Tuple[int, int] = (0, 0),
                 rng: Optional[SeededRNG] = None):
        config.validate()
        self.grid = grid
        self.config = config
        self.rng = rng if rng is not None else SeededRNG(config.seed)
        self.q_table = QTable(grid.size)
        self.policy = EpsilonGreedyPolicy(grid, self.q_table)
        self.epsilon = config.epsilon

        start = Position(*start)
        if grid.is_wall(start):
            raise ValueError(f"Start position {tuple(start)} is a wall")
        self._start = start

        self.agent = AgentRuntimeState(position=start)
        self.stats = EpisodeStats()
        self._episodes_attempted = 0

        self._state_machine = LearnerStateMachine()
        self._state_machine.on_state_enter(LearnerState.RUNNING, self._on_running_entered)
        self._state_machine.on_state_enter(LearnerState.IDLE, self._on_idle_entered)

    # Properties

    @property
    def start_position(self) -> Position:
        """Configured start the agent returns to after each episode."""
        return self._start

    @property
    def goal(self) -> Position:
        return self.grid.goal

    @property
    def state(self) -> LearnerState:
        return self._state_machine.current_state

    @property
    def is_running(self) -> bool:
        return self._state_machine.is_running()

    def describe_state(self) -> str:
        return self._state_machine.get_state_description()

    # Running / Idle

    def start(self) -> bool:
        """Enter RUNNING. Returns False if already running."""
        return self._state_machine.start()

    def stop(self) -> bool:
        """Enter IDLE. Returns False if already idle."""
        return self._state_machine.stop()

    def toggle(self) -> bool:
        return self._state_machine.toggle()

    def _on_running_entered(self, context):
        self.agent.training_enabled = True
        logger.info("Training started at %s (episode %d)", tuple(self.agent.position), self.stats.episode_count)

    def _on_idle_entered(self, context):
        self.agent.training_enabled = False
        logger.info("Training stopped after %d episodes", self.stats.episode_count)

    # Stepping

    def step(self) -> Optional[Transition]:
        """
        Perform one training step if running.

        Returns:
            The transition taken, or None when idle

        Raises:
            AgentTrappedError: The agent cannot move; the learner is now IDLE
            InvalidMoveError: GridWorld rejected the chosen move
        """
        if not self._state_machine.is_running():
            return None
        try:
            return self._advance()
        except AgentTrappedError:
            logger.warning("Agent trapped at %s, stopping training", tuple(self.agent.position))
            self._state_machine.stop()
            raise

    def _advance(self) -> Transition:
        """One transition regardless of RUNNING/IDLE."""
        current = Position(*self.agent.position)

        # Terminal state: reset instead of acting
        if current == self.grid.goal:
            self._finish_episode(reached_goal=True)
            logger.debug("Episode %d complete", self.stats.episode_count)
            return Transition(start=current, end=self._start, episode_completed=True)

        action = self.policy.select_action(current, self.epsilon, self.rng)
        next_pos = self.grid.step(current, action)
        reward = self.grid.reward_at(next_pos)

        new_q = self.update_q_value(current, action, reward, next_pos)

        self.stats.record_step(reward)
        self.agent.position = next_pos
        self.agent.last_action = action
        self.agent.last_reward = reward

        return Transition(start=current, end=next_pos, action=action, reward=reward, q_value=new_q)

    def update_q_value(self, state: Tuple[int, int], action, reward: float,
                       next_state: Tuple[int, int]) -> float:
        """Apply the Q-learning update rule and return the new estimate."""
        current_q = self.q_table.get(state, action)
        next_q_max = self.q_table.max_value(next_state)

        target = reward + self.config.discount_factor * next_q_max
        new_q = current_q + self.config.learning_rate * (target - current_q)

        self.q_table.set(state, action, new_q)
        return new_q

    def _finish_episode(self, reached_goal: bool) -> None:
        self.stats.close_episode(reached_goal=reached_goal)
        self._episodes_attempted += 1
        self.agent.position = self._start
        self.decay_epsilon()

    def decay_epsilon(self):
        """Decay epsilon for less exploration over time."""
        self.epsilon = max(self.config.epsilon_min, self.epsilon * self.config.epsilon_decay)

    # Start / goal relocation

    def relocate_start(self, pos: Tuple[int, int]) -> bool:
        """
        Move the configured start, and the agent, to ``pos``.

        Returns False without changing anything if ``pos`` is a wall or the goal.

        Raises:
            OutOfBoundsError: If ``pos`` is outside the grid
        """
        pos = Position(*pos)
        if self.grid.is_wall(pos) or pos == self.grid.goal:
            return False
        self._start = pos
        self.agent.position = pos
        return True

    def relocate_goal(self, pos: Tuple[int, int]) -> bool:
        """
        Move the goal, rewriting rewards and clearing any wall underneath.

        Returns False without changing anything if ``pos`` is the start.

        Raises:
            OutOfBoundsError: If ``pos`` is outside the grid
        """
        pos = Position(*pos)
        if not self.grid.in_bounds(pos):
            raise OutOfBoundsError(pos, self.grid.size)
        if pos == self._start:
            return False
        self.grid.relocate_goal(pos)
        return True

    def reset_learning(self) -> None:
        """Forget everything learned and put the agent back on the start."""
        self.q_table.reset()
        self.stats = EpisodeStats()
        self._episodes_attempted = 0
        self.epsilon = self.config.epsilon
        self.agent = AgentRuntimeState(position=self._start, training_enabled=self.is_running)

    # Headless helpers

    def run_episodes(self, count: int, max_steps_per_episode: int = 500) -> List[EpisodeResult]:
        """
        Train for ``count`` episodes without a scheduler.

        Works in either state. An episode that has not reached the goal after
        ``max_steps_per_episode`` moves is abandoned: the agent goes back to
        the start and the episode count does not change.
        """
        results = []
        for _ in range(count):
            epsilon_used = self.epsilon
            steps = 0
            while True:
                if steps >= max_steps_per_episode and self.agent.position != self.grid.goal:
                    self._finish_episode(reached_goal=False)
                    reached_goal = False
                    break
                transition = self._advance()
                if transition.episode_completed:
                    reached_goal = True
                    break
                steps += 1

            results.append(EpisodeResult(
                number=self._episodes_attempted,
                steps=steps,
                total_reward=self.stats.last_episode_reward,
                reached_goal=reached_goal,
                epsilon_used=epsilon_used,
            ))
        return results

    def greedy_path(self, max_steps: Optional[int] = None) -> List[Position]:
        """Follow the best known action from the start without learning."""
        if max_steps is None:
            max_steps = self.grid.size * self.grid.size
        pos = self._start
        path = [pos]
        for _ in range(max_steps):
            if pos == self.grid.goal:
                break
            valid_actions = self.grid.valid_actions(pos)
            if not valid_actions:
                break
            action = self.q_table.best_action(pos, valid_actions)
            pos = self.grid.step(pos, action)
            path.append(pos)
        return path
