"""Main entry point for the Q-learning maze."""

import logging
import signal
import sys

from PySide6.QtWidgets import QApplication


def main():
    """Main entry point for the maze application."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName("Reinforcement Learning Maze")
    app.setApplicationVersion("1.0.0")

    # Import UI components (after QApplication is created)
    from .ui.main_window import MainWindow
    from .app.controller import MazeController

    controller = MazeController()
    window = MainWindow(controller)

    def signal_handler(sig, frame):
        """Handle system signals for graceful shutdown."""
        print(f"\nReceived signal {sig}, shutting down gracefully...")
        controller.cleanup()
        window.close()
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        window.show()
        window.grid_view.fit_in_view()
        return app.exec()
    finally:
        controller.cleanup()


if __name__ == "__main__":
    sys.exit(main())
