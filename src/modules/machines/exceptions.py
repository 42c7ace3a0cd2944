"""Machine configuration exceptions."""

from __future__ import annotations


class MachineConfigError(Exception):
    """The machine list could not be read or is malformed."""
