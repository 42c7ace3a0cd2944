"""Order board exceptions.

Gateway errors are raised by the state repositories and handled by the
``OrderStore``, which logs them and falls back (load) or reports the
data-level outcome anyway (save).  ``InvalidOrderStatus`` is raised to
callers of ``add``/``update``.
"""

from __future__ import annotations


class StateLoadError(Exception):
    """The persisted collection could not be fetched or decoded."""


class StateSaveError(Exception):
    """The collection could not be written to the backend."""


class InvalidOrderStatus(ValueError):
    """The status is not part of the board's configured status set."""


class UnknownStateBackend(ValueError):
    """``ORDER_STATE_BACKEND`` names a backend that does not exist."""
