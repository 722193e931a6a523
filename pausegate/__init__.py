"""PauseGate: maintenance mode gate with a customizable 503 page."""

__version__ = "1.0.0"
