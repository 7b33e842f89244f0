"""Caller access verification against Whop memberships."""

from trading_signals.auth.whop import AccessVerification, AccessVerifier, WhopClient

__all__ = ["AccessVerification", "AccessVerifier", "WhopClient"]
