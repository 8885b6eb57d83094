"""Save-game persistence: a single named slot on disk."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from pathlib import Path

from backend.models.exceptions import CorruptionError
from backend.utils.logger import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SaveRecord:
    n: int
    m: int
    data: bytes

    def to_json(self) -> dict:
        return {
            "n": self.n,
            "m": self.m,
            "data": base64.b64encode(self.data).decode("ascii"),
        }

    @classmethod
    def from_json(cls, raw: dict) -> SaveRecord:
        """Decode a stored record.  Length is checked by the state store."""
        try:
            n = int(raw["n"])
            m = int(raw["m"])
            data = base64.b64decode(raw["data"], validate=True)
        except (KeyError, TypeError, ValueError, binascii.Error) as exc:
            raise CorruptionError(f"Malformed save record: {exc}") from exc
        return cls(n=n, m=m, data=data)


class SaveSlot:
    """Loads, saves, and discards the one saved game in a JSON file."""

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath

    # -- queries --------------------------------------------------------------

    def exists(self) -> bool:
        return self.filepath.is_file()

    def load(self) -> SaveRecord | None:
        """Return the saved record, or ``None`` when the slot is empty."""
        if not self.exists():
            return None
        try:
            raw = json.loads(self.filepath.read_text())
        except (OSError, ValueError) as exc:
            raise CorruptionError(f"Unreadable save file {self.filepath}: {exc}") from exc
        if not isinstance(raw, dict):
            raise CorruptionError(f"Unexpected save file layout in {self.filepath}")
        return SaveRecord.from_json(raw)

    # -- persistence ----------------------------------------------------------

    def save(self, record: SaveRecord) -> None:
        """Write the record.  Failures are logged, never raised."""
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            self.filepath.write_text(json.dumps(record.to_json()) + "\n")
        except OSError as exc:
            LOGGER.warning("Could not write save file %s: %s", self.filepath, exc)
            return
        LOGGER.info("Game saved (%dx%d) to %s", record.n, record.m, self.filepath)

    def discard(self) -> None:
        self.filepath.unlink(missing_ok=True)
