"""
Services module - storage, progress, background work, processing and enhancement
"""

from .store import KeyValueStore, MemoryStore
from .progress_tracker import ProgressTracker, calculate_progress, progress_tracker
from .background_tasks import BackgroundTaskManager, BackgroundTask, TaskStatus, get_task_manager
from .upload_storage import UploadStorage, LocalUploadStorage
from .document_processor import DocumentProcessor
from .enhancement import EnhancementOrchestrator, fallback_bullets
from .document_service import DocumentService

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "ProgressTracker",
    "calculate_progress",
    "progress_tracker",
    "BackgroundTaskManager",
    "BackgroundTask",
    "TaskStatus",
    "get_task_manager",
    "UploadStorage",
    "LocalUploadStorage",
    "DocumentProcessor",
    "EnhancementOrchestrator",
    "fallback_bullets",
    "DocumentService",
]
