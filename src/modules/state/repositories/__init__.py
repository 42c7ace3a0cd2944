"""State entry repositories package."""

from modules.state.repositories.django_repository import StateEntryDjangoRepository
from modules.state.repositories.interfaces import IStateEntryRepository

__all__ = ["IStateEntryRepository", "StateEntryDjangoRepository"]
