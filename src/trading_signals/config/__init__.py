"""Configuration system."""

from trading_signals.config.loader import load_config
from trading_signals.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
