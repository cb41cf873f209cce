"""Mock Data Store — flat JSON file standing in for chain reads during development.

Invariants:
    - Shape is always {"commitments": [...], "attestations": [...], "listings": [...]}
    - A missing file reads as the empty shape
    - A corrupt file reads as the empty shape and logs a warning
    - File IO runs in a worker thread, never on the event loop
    - Writes and read-modify-write cycles are serialized by one lock per store
    - A save replaces the file in one step; readers never see a partial write

Design Decisions:
    - JSON file over a database: demo data only, no persistence engine
      (non-goal), human-editable
"""

import asyncio
import json
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class MockData:
    commitments: list[dict] = field(default_factory=list)
    attestations: list[dict] = field(default_factory=list)
    listings: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "commitments": self.commitments,
            "attestations": self.attestations,
            "listings": self.listings,
        }


class MockDataStore:
    """Reads and writes MockData to a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    async def load(self) -> MockData:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, data: MockData) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._save_sync, data)

    @asynccontextmanager
    async def mutate(self) -> AsyncIterator[MockData]:
        """Load, let the caller edit, then save; no other write interleaves.

        Nothing is saved if the block raises.
        """
        async with self._write_lock:
            data = await asyncio.to_thread(self._load_sync)
            yield data
            await asyncio.to_thread(self._save_sync, data)

    def _load_sync(self) -> MockData:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return MockData()
        except ValueError as e:
            logger.warning(f"Mock data file {self.path} is not valid JSON: {e}")
            return MockData()
        if not isinstance(raw, dict):
            logger.warning(f"Mock data file {self.path} is not a JSON object")
            return MockData()
        return MockData(
            commitments=list(raw.get("commitments") or []),
            attestations=list(raw.get("attestations") or []),
            listings=list(raw.get("listings") or []),
        )

    def _save_sync(self, data: MockData) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(
            json.dumps(data.to_dict(), indent=2), encoding="utf-8",
        )
        os.replace(tmp_path, self.path)
