"""Trading Signals — admin-posted trade signals with a subscriber feed."""

__version__ = "0.1.0"
