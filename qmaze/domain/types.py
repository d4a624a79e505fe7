"""Core type definitions for the Q-learning maze."""

from dataclasses import dataclass
from typing import Optional, Tuple, Literal, Dict, NamedTuple

from .errors import InvalidConfigurationError


# Coordinate type accepted wherever a position is read
Coord = Tuple[int, int]


class Position(NamedTuple):
    """Grid coordinate. Compares equal to a plain ``(x, y)`` tuple."""
    x: int
    y: int


# Actions the agent can take
Action = Literal["up", "down", "left", "right"]

# Enumeration order doubles as the tie-break priority (up > down > left > right)
ACTIONS: Tuple[Action, ...] = ("up", "down", "left", "right")

ACTION_TO_INT: Dict[Action, int] = {action: index for index, action in enumerate(ACTIONS)}

ACTION_DELTAS: Dict[Action, Tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

# Cosmetic agent identities offered by the renderer
AgentTag = Literal["robot", "cat", "fox", "panda", "lion"]

AGENT_ICONS: Dict[AgentTag, str] = {
    "robot": "\U0001F916",
    "cat": "\U0001F431",
    "fox": "\U0001F98A",
    "panda": "\U0001F43C",
    "lion": "\U0001F981",
}


def move(pos: Tuple[int, int], action: Action) -> Position:
    """Return the position one step from ``pos`` in ``action``'s direction (unchecked)."""
    dx, dy = ACTION_DELTAS[action]
    return Position(pos[0] + dx, pos[1] + dy)


def manhattan_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass
class Cell:
    """A single grid location."""
    coord: Position
    is_wall: bool = False
    reward: float = -1.0


@dataclass
class MazeConfig:
    """Configuration for the maze and the Q-learning agent."""
    grid_size: int = 10
    wall_probability: float = 0.2
    learning_rate: float = 0.1
    discount_factor: float = 0.9
    epsilon: float = 0.1
    epsilon_decay: float = 1.0  # 1.0 keeps epsilon constant
    epsilon_min: float = 0.0
    reward_goal: float = 1000.0
    reward_step: float = -1.0
    # Rewards written when the goal is moved after generation
    relocated_reward_goal: float = 100.0
    relocated_reward_step: float = -10.0
    step_interval_ms: int = 500
    seed: Optional[int] = None

    def validate(self) -> None:
        """Raise InvalidConfigurationError if any parameter is out of range."""
        unit_interval = {
            "learning_rate": self.learning_rate,
            "discount_factor": self.discount_factor,
            "epsilon": self.epsilon,
            "epsilon_decay": self.epsilon_decay,
            "epsilon_min": self.epsilon_min,
            "wall_probability": self.wall_probability,
        }
        for name, value in unit_interval.items():
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigurationError(f"{name} must be within [0, 1], got {value}")

        if self.step_interval_ms != int(self.step_interval_ms) or self.step_interval_ms <= 0:
            raise InvalidConfigurationError(
                f"step_interval_ms must be a positive whole number, got {self.step_interval_ms}"
            )
        if self.grid_size < 2:
            raise InvalidConfigurationError(f"grid_size must be at least 2, got {self.grid_size}")


@dataclass
class AgentRuntimeState:
    """Where the agent is and what it did last."""
    position: Position
    last_action: Optional[Action] = None
    last_reward: Optional[float] = None
    training_enabled: bool = False


@dataclass
class EpisodeStats:
    """Episode counters. ``total_reward`` is a running total that is never reset."""
    episode_count: int = 0
    total_reward: float = 0.0
    episode_reward: float = 0.0
    episode_steps: int = 0
    last_episode_reward: float = 0.0
    last_episode_steps: int = 0

    def record_step(self, reward: float) -> None:
        self.total_reward += reward
        self.episode_reward += reward
        self.episode_steps += 1

    def close_episode(self, reached_goal: bool = True) -> None:
        """Roll the per-episode counters over into the ``last_*`` fields."""
        if reached_goal:
            self.episode_count += 1
        self.last_episode_reward = self.episode_reward
        self.last_episode_steps = self.episode_steps
        self.episode_reward = 0.0
        self.episode_steps = 0

    def snapshot(self) -> "EpisodeStats":
        return EpisodeStats(
            episode_count=self.episode_count,
            total_reward=self.total_reward,
            episode_reward=self.episode_reward,
            episode_steps=self.episode_steps,
            last_episode_reward=self.last_episode_reward,
            last_episode_steps=self.last_episode_steps,
        )


@dataclass
class Transition:
    """Observable result of one learner step."""
    start: Position
    end: Position
    action: Optional[Action] = None
    reward: float = 0.0
    episode_completed: bool = False
    q_value: Optional[float] = None

    def describe(self) -> str:
        """One-line summary for status displays."""
        if self.episode_completed:
            return f"Goal reached, agent reset to {tuple(self.end)}"
        return f"Action: {self.action}, Reward: {self.reward:g}"


@dataclass
class EpisodeResult:
    """Outcome of one headless training episode."""
    number: int
    steps: int
    total_reward: float
    reached_goal: bool
    epsilon_used: float
