"""Storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO


class AbstractStorage(ABC):
    """Interface for degree document storage backends."""

    @abstractmethod
    def save(self, file_obj: IO[bytes], filename: str) -> str:
        """Persist a file, replacing any previous one, and return its relative path."""

    @abstractmethod
    def resolve(self, path: str) -> Path:
        """Map a stored pointer (absolute or relative) to a readable location."""

    def exists(self, path: str) -> bool:
        """Return whether the pointer resolves to a readable file."""

        return self.resolve(path).is_file()
