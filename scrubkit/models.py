# scrubkit/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class MetadataEntry:
    category: str
    key: str
    value: str

    def as_dict(self) -> dict:
        return {"category": self.category, "key": self.key, "value": self.value}


@dataclass
class ScrubResult:
    """Cleaned file bytes plus the entries that were present before cleaning."""
    cleaned_file_bytes: bytes
    metadata_removed: List[MetadataEntry] = field(default_factory=list)
