"""
History Ledger for panelscore.

Append-only, per-subject history of evaluation snapshots.
One JSON document per subject: {base_dir}/{subject_id}/history.json

Key properties:
- Append-only: entries are never modified or removed
- Sequential: evaluation_number = number of stored entries + 1
- Forgiving reads: a missing or unreadable document is an empty history
- Strict writes: a failed write raises HistoryWriteError
- Human-readable: indented JSON list

The read-modify-write in append() is serialized per subject within one
process. Concurrent writers in different processes must be prevented by
the caller.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import PanelConfig, get_panel_config
from ..errors import HistoryWriteError
from .types import EvaluationSnapshot, HistoryEntry

logger = logging.getLogger(__name__)


class HistoryLedger:
    """
    File-backed evaluation history, one document per subject.
    
    Usage:
        ledger = HistoryLedger(base_dir="kb/history")
        
        entry = ledger.append("a1b2c3", EvaluationSnapshot(metrics={"code_quality": 7.2}))
        entry.evaluation_number  # 1
        
        entries = ledger.read("a1b2c3")
    """
    
    def __init__(
        self,
        base_dir: Optional[str] = None,
        filename: Optional[str] = None,
        config: Optional[PanelConfig] = None,
    ):
        """
        Initialize the ledger.
        
        Args:
            base_dir: Root directory of subject documents (config default if None)
            filename: Document file name inside a subject dir (config default if None)
            config: PanelConfig (uses global if None)
        """
        self.config = config or get_panel_config()
        self.base_dir = Path(base_dir or self.config.history_base_dir)
        self.filename = filename or self.config.history_filename
        
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
    
    def history_path(self, subject_id: str) -> Path:
        """Path to a subject's history document."""
        self._check_subject_id(subject_id)
        return self.base_dir / subject_id / self.filename
    
    def append(self, subject_id: str, snapshot: EvaluationSnapshot) -> HistoryEntry:
        """
        Append an evaluation snapshot to a subject's history.
        
        Args:
            subject_id: Subject identifier (e.g. a commit hash)
            snapshot: Evaluation results to record
        
        Returns:
            The persisted HistoryEntry
        
        Raises:
            ValueError: If the subject id is empty or contains path separators
            HistoryWriteError: If the updated document could not be written
        """
        path = self.history_path(subject_id)
        
        with self._subject_lock(subject_id):
            stored = self._read_raw(subject_id)
            entry = HistoryEntry.from_snapshot(snapshot, evaluation_number=len(stored) + 1)
            # Existing items are written back untouched
            stored.append(entry.to_dict())
            self._write(subject_id, path, stored)
        
        logger.info(
            f"[HISTORY] Recorded evaluation #{entry.evaluation_number} "
            f"for {subject_id} (source={entry.source})"
        )
        return entry
    
    def read(self, subject_id: str) -> List[HistoryEntry]:
        """
        Read a subject's history.
        
        Returns:
            HistoryEntry list in evaluation order (empty if none or unreadable)
        """
        entries = []
        for position, item in enumerate(self._read_raw(subject_id), 1):
            if not isinstance(item, dict):
                logger.warning(
                    f"[HISTORY] Skipping malformed entry {position} for {subject_id}"
                )
                continue
            try:
                entries.append(HistoryEntry.from_dict(item, position=position))
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(
                    f"[HISTORY] Skipping malformed entry {position} for {subject_id}: {e}"
                )
        return entries
    
    def latest(self, subject_id: str) -> Optional[HistoryEntry]:
        """Most recent entry, or None if the subject has no history."""
        entries = self.read(subject_id)
        return entries[-1] if entries else None
    
    def count(self, subject_id: str) -> int:
        return len(self._read_raw(subject_id))
    
    def subjects(self) -> List[str]:
        """Subjects that have a history document."""
        if not self.base_dir.exists():
            return []
        return sorted(
            p.name for p in self.base_dir.iterdir()
            if p.is_dir() and (p / self.filename).exists()
        )
    
    def _read_raw(self, subject_id: str) -> List[Any]:
        path = self.history_path(subject_id)
        if not path.exists():
            return []
        
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"[HISTORY] Unreadable history for {subject_id}, treating as empty: {e}")
            return []
        
        if not isinstance(data, list):
            logger.warning(
                f"[HISTORY] History for {subject_id} is not a list "
                f"({type(data).__name__}), treating as empty"
            )
            return []
        return data
    
    def _write(self, subject_id: str, path: Path, stored: List[Any]) -> None:
        # Temp file + atomic rename; the document is always valid JSON
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            content = json.dumps(stored, ensure_ascii=False, indent=2)
            tmp_path.write_text(content, encoding="utf-8")
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"[HISTORY] Failed to write history for {subject_id}: {e}")
            raise HistoryWriteError(
                f"Failed to write history for {subject_id}: {e}",
                subject_id=subject_id,
                cause=e,
            ) from e
    
    def _subject_lock(self, subject_id: str) -> threading.Lock:
        with self._locks_guard:
            if subject_id not in self._locks:
                self._locks[subject_id] = threading.Lock()
            return self._locks[subject_id]
    
    @staticmethod
    def _check_subject_id(subject_id: str) -> None:
        if not subject_id or not subject_id.strip():
            raise ValueError("Subject id must be a non-empty string")
        if "/" in subject_id or "\\" in subject_id or subject_id in (".", ".."):
            raise ValueError(f"Subject id must not contain path separators: {subject_id!r}")


# Global ledger instance
_ledger: Optional[HistoryLedger] = None


def get_history_ledger(config: Optional[PanelConfig] = None) -> HistoryLedger:
    """Get global history ledger instance."""
    global _ledger
    if _ledger is None:
        _ledger = HistoryLedger(config=config)
    return _ledger


def reset_history_ledger() -> None:
    """Reset global ledger (mainly for testing)."""
    global _ledger
    _ledger = None
