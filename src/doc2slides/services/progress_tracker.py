"""
Progress tracker for document enhancement
"""

import logging
import math
import threading
import time
from typing import List, Optional

from ..core.models import ProgressRecord, ProgressStage
from .store import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

STAGE_PROGRESS = {
    ProgressStage.EXTRACTING: 10,
    ProgressStage.SUMMARIZING: 80,
    ProgressStage.CONCLUSION: 90,
    ProgressStage.COMPLETE: 100,
}
ENHANCING_START = 10
ENHANCING_SPAN = 70
ENHANCING_UNKNOWN = 50


def calculate_progress(stage: ProgressStage, processed_chunks: int, total_chunks: int) -> int:
    """
    Percentage for a stage and chunk ratio, rounded half-up

    Enhancing spans 10-80% by processed/total chunks, or sits at 50% when the
    total is unknown. Every other stage has a flat value.
    """
    if stage == ProgressStage.ENHANCING:
        if total_chunks > 0:
            ratio = min(max(processed_chunks, 0), total_chunks) / total_chunks
            value = ENHANCING_START + ENHANCING_SPAN * ratio
        else:
            value = ENHANCING_UNKNOWN
    else:
        value = STAGE_PROGRESS[stage]
    return min(100, max(0, math.floor(value + 0.5)))


class ProgressTracker:
    """
    Thread-safe, per-document progress records

    Stages only move forward and the published percentage never decreases,
    whatever order updates arrive in.
    """

    def __init__(self, store: Optional[KeyValueStore[ProgressRecord]] = None):
        self._store: KeyValueStore[ProgressRecord] = store if store is not None else MemoryStore()
        self._lock = threading.Lock()

    def start(self, document_id: str, message: str = "Extracting content") -> ProgressRecord:
        """
        Begin a new record for a document, replacing any previous one

        A finished record is replaced too, so a re-processed document starts
        a new cycle at the extracting stage.
        """
        with self._lock:
            record = ProgressRecord(
                document_id=document_id,
                stage=ProgressStage.EXTRACTING,
                progress=calculate_progress(ProgressStage.EXTRACTING, 0, 0),
                message=message,
            )
            self._store.set(document_id, record)
            logger.debug(f"Document {document_id} progress: {record.progress}% ({record.stage.value})")
            return record.model_copy()

    def update(
        self,
        document_id: str,
        stage: Optional[ProgressStage] = None,
        total_chunks: Optional[int] = None,
        processed_chunks: Optional[int] = None,
        advance: int = 0,
        message: Optional[str] = None,
    ) -> ProgressRecord:
        """
        Apply a partial update

        Args:
            document_id: document whose record to update
            stage: new stage; ignored when it is behind the current one
            total_chunks: new unit total
            processed_chunks: absolute processed count
            advance: units to add to the processed count
            message: human-readable status line

        Returns:
            a copy of the updated record
        """
        with self._lock:
            record = self._store.get(document_id)
            if record is None:
                record = ProgressRecord(document_id=document_id)

            if stage is not None and stage.order >= record.stage.order:
                record.stage = stage
            if total_chunks is not None:
                record.total_chunks = max(0, total_chunks)
            if processed_chunks is not None:
                record.processed_chunks = max(record.processed_chunks, processed_chunks)
            record.processed_chunks += max(0, advance)
            if record.total_chunks:
                record.processed_chunks = min(record.processed_chunks, record.total_chunks)
            if message is not None:
                record.message = message

            computed = calculate_progress(record.stage, record.processed_chunks, record.total_chunks)
            record.progress = max(record.progress, computed)
            record.last_update = time.time()
            self._store.set(document_id, record)

            logger.debug(
                f"Document {document_id} progress: {record.progress}% "
                f"({record.stage.value}, {record.processed_chunks}/{record.total_chunks})"
            )
            return record.model_copy()

    def advance(self, document_id: str, units: int = 1) -> ProgressRecord:
        return self.update(document_id, advance=units)

    def complete(self, document_id: str, message: str = "Processing complete") -> ProgressRecord:
        return self.update(document_id, stage=ProgressStage.COMPLETE, message=message)

    def get(self, document_id: str) -> Optional[ProgressRecord]:
        with self._lock:
            record = self._store.get(document_id)
            return record.model_copy() if record is not None else None

    def remove(self, document_id: str) -> bool:
        with self._lock:
            return self._store.delete(document_id)

    def cleanup_old_records(self, max_age_seconds: int = 3600) -> List[str]:
        """Drop completed records not touched for max_age_seconds; returns the removed ids"""
        cutoff = time.time() - max_age_seconds
        removed = []
        with self._lock:
            for document_id in self._store.keys():
                record = self._store.get(document_id)
                if record and record.stage == ProgressStage.COMPLETE and record.last_update < cutoff:
                    self._store.delete(document_id)
                    removed.append(document_id)
        if removed:
            logger.info(f"Removed {len(removed)} finished progress records")
        return removed


# Global progress tracker instance
progress_tracker = ProgressTracker()
