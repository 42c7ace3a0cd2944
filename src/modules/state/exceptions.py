"""State endpoint exceptions.

Raised by the state repository; the view translates them into HTTP
responses.
"""

from __future__ import annotations


class StoredStateCorrupt(Exception):
    """The stored document for a key is not valid JSON."""
