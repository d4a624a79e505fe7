"""Error types raised by the maze domain."""


class MazeError(Exception):
    """Base class for every error raised by the maze domain."""


class OutOfBoundsError(MazeError, ValueError):
    """A position lies outside the grid."""

    def __init__(self, pos, size: int):
        self.pos = tuple(pos)
        self.size = size
        super().__init__(f"Position {self.pos} is outside the {size}x{size} grid")


class InvalidMoveError(MazeError):
    """An action would move the agent into a wall or off the grid."""

    def __init__(self, pos, action: str):
        self.pos = tuple(pos)
        self.action = action
        super().__init__(f"Action '{action}' from {self.pos} is not a valid move")


class AgentTrappedError(MazeError):
    """The agent has no valid action from its current position."""

    def __init__(self, pos):
        self.pos = tuple(pos)
        super().__init__(f"Agent at {self.pos} is enclosed by walls and cannot move")


class InvalidConfigurationError(MazeError, ValueError):
    """A configuration parameter is outside its allowed range."""
