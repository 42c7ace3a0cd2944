"""Order state repositories package."""

from modules.orders.repositories.factory import build_state_repository
from modules.orders.repositories.file_repository import FileOrderStateRepository
from modules.orders.repositories.gist_repository import GistOrderStateRepository
from modules.orders.repositories.http_repository import HttpOrderStateRepository
from modules.orders.repositories.interfaces import IOrderStateRepository
from modules.orders.repositories.memory_repository import InMemoryOrderStateRepository

__all__ = [
    "FileOrderStateRepository",
    "GistOrderStateRepository",
    "HttpOrderStateRepository",
    "IOrderStateRepository",
    "InMemoryOrderStateRepository",
    "build_state_repository",
]
