"""Main window for the Q-learning maze."""

from PySide6.QtWidgets import (
    QMainWindow, QVBoxLayout, QHBoxLayout, QWidget, QPushButton,
    QLabel, QSlider, QComboBox, QGroupBox, QStatusBar
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut, QCloseEvent

from ..app.controller import MazeController
from ..domain.types import AGENT_ICONS
from .grid_view import GridView

# Step interval range offered by the speed slider (milliseconds)
MIN_STEP_INTERVAL_MS = 100
MAX_STEP_INTERVAL_MS = 2000


class MainWindow(QMainWindow):
    """Main application window for the Q-learning maze."""

    def __init__(self, controller: MazeController):
        super().__init__()
        self.controller = controller

        self.setWindowTitle("Reinforcement Learning Maze")
        self.setMinimumSize(800, 760)

        self._create_ui()
        self._setup_connections()
        self._setup_shortcuts()

        self._update_button_states()
        self._update_statistics_display()

    def _create_ui(self):
        """Create the user interface."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        main_layout.addLayout(self._create_controls())

        stats_layout = QHBoxLayout()
        self.episodes_label = QLabel()
        self.total_reward_label = QLabel()
        self.episode_reward_label = QLabel()
        self.epsilon_label = QLabel()
        for label in [self.episodes_label, self.total_reward_label,
                      self.episode_reward_label, self.epsilon_label]:
            stats_layout.addWidget(label)
        stats_layout.addStretch()
        main_layout.addLayout(stats_layout)

        self.grid_view = GridView(self.controller)
        main_layout.addWidget(self.grid_view, 1)

        info_group = QGroupBox("Training Information")
        info_layout = QVBoxLayout(info_group)
        self.last_action_label = QLabel("")
        info_layout.addWidget(self.last_action_label)
        main_layout.addWidget(info_group)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self._update_status_message()

    def _create_controls(self) -> QHBoxLayout:
        """Create the control panel."""
        layout = QHBoxLayout()

        self.train_btn = QPushButton("Start Training")
        layout.addWidget(self.train_btn)

        # Speed control
        layout.addWidget(QLabel("Speed:"))
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(MIN_STEP_INTERVAL_MS, MAX_STEP_INTERVAL_MS)
        self.speed_slider.setValue(self.controller.session.step_interval_ms)
        layout.addWidget(self.speed_slider)
        self.speed_label = QLabel(f"{self.speed_slider.value()}ms")
        self.speed_label.setMinimumWidth(60)
        layout.addWidget(self.speed_label)

        # Agent selection
        layout.addWidget(QLabel("Agent:"))
        self.agent_combo = QComboBox()
        for tag, icon in AGENT_ICONS.items():
            self.agent_combo.addItem(f"{icon} {tag.title()}", tag)
        self.agent_combo.setCurrentIndex(self.agent_combo.findData(self.controller.session.agent_tag))
        layout.addWidget(self.agent_combo)

        self.set_start_btn = QPushButton("Set Start")
        self.set_goal_btn = QPushButton("Set Goal")
        self.new_maze_btn = QPushButton("New Maze")
        self.reset_btn = QPushButton("Reset Learning")
        for btn in [self.set_start_btn, self.set_goal_btn, self.new_maze_btn, self.reset_btn]:
            layout.addWidget(btn)

        layout.addStretch()
        return layout

    def _setup_connections(self):
        """Setup signal connections."""
        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.step_completed.connect(self._on_step_completed)
        self.controller.episode_completed.connect(self._on_episode_completed)
        self.controller.session_changed.connect(self._on_session_changed)
        self.controller.grid_updated.connect(self._update_statistics_display)
        self.controller.error_occurred.connect(self._on_error_occurred)

        self.train_btn.clicked.connect(self.controller.toggle_training)
        self.speed_slider.valueChanged.connect(self._on_speed_changed)
        self.agent_combo.currentIndexChanged.connect(self._on_agent_changed)
        self.set_start_btn.clicked.connect(self.controller.arm_start_relocation)
        self.set_goal_btn.clicked.connect(self.controller.arm_goal_relocation)
        self.new_maze_btn.clicked.connect(self._on_new_maze_clicked)
        self.reset_btn.clicked.connect(self.controller.reset_learning)

    def _setup_shortcuts(self):
        """Setup keyboard shortcuts."""
        QShortcut(QKeySequence("Q"), self, self.close)
        QShortcut(QKeySequence("Space"), self, self.controller.toggle_training)
        QShortcut(QKeySequence("S"), self, self.controller.arm_start_relocation)
        QShortcut(QKeySequence("G"), self, self.controller.arm_goal_relocation)

    # Controller signal handlers

    def _on_state_changed(self, running: bool):
        self._update_button_states()
        self._update_status_message()

    def _on_step_completed(self, transition):
        self.last_action_label.setText(transition.describe())

    def _on_episode_completed(self, episode_count: int):
        self.status_bar.showMessage(f"Episode {episode_count} complete", 2000)

    def _on_session_changed(self):
        self._update_button_states()
        self._update_status_message()

    def _on_error_occurred(self, error_msg: str):
        self.status_bar.showMessage(f"Error: {error_msg}", 5000)

    # Widget handlers

    def _on_speed_changed(self, value: int):
        self.speed_label.setText(f"{value}ms")
        self.controller.set_step_interval(value)

    def _on_agent_changed(self, index: int):
        self.controller.set_agent_tag(self.agent_combo.itemData(index))

    def _on_new_maze_clicked(self):
        if self.controller.new_maze():
            self.last_action_label.setText("")
            self.grid_view.fit_in_view()

    # Display updates

    def _update_button_states(self):
        running = self.controller.is_running
        session = self.controller.session
        self.train_btn.setText("Stop Training" if running else "Start Training")
        self.set_start_btn.setDown(session.awaiting_start_click)
        self.set_goal_btn.setDown(session.awaiting_goal_click)

    def _update_status_message(self):
        pending = self.controller.session.pending_edit
        if pending == "start":
            self.status_bar.showMessage("Click a cell to place the start")
        elif pending == "goal":
            self.status_bar.showMessage("Click a cell to place the goal")
        else:
            self.status_bar.showMessage(self.controller.learner.describe_state())

    def _update_statistics_display(self):
        stats = self.controller.get_statistics()
        self.episodes_label.setText(f"Episode: {stats['episode_count']}")
        self.total_reward_label.setText(f"Total Reward: {stats['total_reward']:g}")
        self.episode_reward_label.setText(f"Episode Reward: {stats['episode_reward']:g}")
        self.epsilon_label.setText(f"Epsilon: {stats['epsilon']:.2f}")

    def closeEvent(self, event: QCloseEvent):
        """Stop training before the window closes."""
        self.controller.cleanup()
        super().closeEvent(event)
