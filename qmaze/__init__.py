"""Q-Maze - tabular Q-learning in an interactive grid world.

An agent learns to reach a movable goal through a randomly walled grid using
epsilon-greedy Q-learning, one step per timer tick.
"""

__version__ = "1.0.0"
__author__ = "Q-Maze Demo"
