"""
Storage for tracked positions.
A document collection with one record per position: a JSON file on disk,
or an in-memory list for page-local state.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from loguru import logger

from ..errors import FetchError
from .models import Position


class PortfolioStorage(ABC):
    """Collection of tracked positions"""

    @abstractmethod
    async def add_entry(self, position: Position) -> None:
        """Persist a new position"""

    @abstractmethod
    async def list_entries(self) -> List[Position]:
        """Return every stored position"""


class InMemoryPortfolioStorage(PortfolioStorage):
    """Positions held in process memory; lost on restart"""

    def __init__(self):
        self.positions: List[Position] = []
        logger.debug("Initialized InMemoryPortfolioStorage")

    async def add_entry(self, position: Position) -> None:
        self.positions.append(position)
        logger.info(f"Added {position.ticker} to in-memory portfolio")

    async def list_entries(self) -> List[Position]:
        return list(self.positions)


class JsonPortfolioStorage(PortfolioStorage):
    """Positions stored as a list of documents in a JSON file"""

    def __init__(self, file_path: str = "portfolio.json"):
        """
        Initialize the portfolio storage.

        Args:
            file_path: Path to the portfolio JSON file
        """
        self.file_path = file_path
        logger.debug(f"Initialized JsonPortfolioStorage with file: {file_path}")

    def _read_documents(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.file_path):
            return []

        try:
            with open(self.file_path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise FetchError(f"Could not read portfolio from {self.file_path}: {e}") from e

        if not isinstance(data, list):
            raise FetchError(f"Portfolio file {self.file_path} does not hold a list of documents")
        return data

    def _write_documents(self, documents: List[Dict[str, Any]]) -> None:
        tmp_path = f"{self.file_path}.tmp"
        try:
            with open(tmp_path, "w") as f:
                json.dump(documents, f, indent=2)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise FetchError(f"Could not write portfolio to {self.file_path}: {e}") from e

    async def add_entry(self, position: Position) -> None:
        """
        Append a position document to the file.

        Raises:
            FetchError: If the file cannot be read or written
        """
        documents = self._read_documents()
        documents.append(position.to_dict())
        self._write_documents(documents)
        logger.info(f"Saved {position.ticker} to {self.file_path} ({len(documents)} positions)")

    async def list_entries(self) -> List[Position]:
        """
        Re-read every position from the file.

        Malformed documents are logged and skipped.

        Raises:
            FetchError: If the file cannot be read
        """
        positions = []
        for document in self._read_documents():
            try:
                positions.append(Position.from_dict(document))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed portfolio document {document!r}: {e}")

        logger.debug(f"Loaded {len(positions)} positions from {self.file_path}")
        return positions


def create_storage(kind: str = "json", file_path: str = "portfolio.json") -> PortfolioStorage:
    """Build the storage backend named by configuration"""
    if kind == "memory":
        return InMemoryPortfolioStorage()
    return JsonPortfolioStorage(file_path)
