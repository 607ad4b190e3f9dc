"""Errors raised by the console page layer."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for Service Center interaction failures."""


class LoginError(ConsoleError):
    """Login to a Service Center endpoint failed; aborts that endpoint's work."""


class NavigationError(ConsoleError):
    """A page loaded with a server error status; treated as transient."""


class ScanError(ConsoleError):
    """The module list could not be prepared for scanning (e.g. filter not applied)."""
