"""Persistence for signals, reads, users and audit entries."""

from trading_signals.store.signals import SignalStore

__all__ = ["SignalStore"]
