"""
Parse diagnostics for the model readers.

Both readers drop entries whose type name is not in the taxonomy. Instead of
dropping them silently, each omission is recorded here so tests and operators
can see drift between a document and the taxonomy.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class SkippedEntry:
    """One document entry left out of the resulting model."""
    container: str                 # e.g. "folder:business", "elements", "relationships"
    type_name: str                 # Type name as written in the document
    identifier: Optional[str]      # Entry id, if it had one
    reason: str


@dataclass
class ParseDiagnostics:
    """Collector for entries skipped while reading a document."""
    source: Optional[str] = None
    skipped: List[SkippedEntry] = field(default_factory=list)

    def skip(self, container: str, type_name: str, identifier: Optional[str], reason: str) -> None:
        entry = SkippedEntry(container=container, type_name=type_name, identifier=identifier, reason=reason)
        self.skipped.append(entry)
        logger.warning(f"Skipped {type_name or '<untyped>'} '{identifier}' in {container}: {reason}")

    @property
    def has_skipped(self) -> bool:
        return bool(self.skipped)

    def counts_by_type(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for entry in self.skipped:
            counts[entry.type_name] = counts.get(entry.type_name, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self.skipped)
