"""
Thread Store - in-memory records written by the cleanup backend
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from clean_inbox.models import CleanThread


logger = logging.getLogger(__name__)


class ThreadStore:
    """Holds the latest CleanThread record per thread id"""

    def __init__(self):
        self.threads_by_id: Dict[str, CleanThread] = {}

    def upsert(self, thread: CleanThread) -> None:
        self.threads_by_id[thread.thread_id] = thread

    def upsert_many(self, threads: Iterable[CleanThread]) -> int:
        count = 0
        for thread in threads:
            self.upsert(thread)
            count += 1
        logger.debug(f"Stored {count} threads ({len(self.threads_by_id)} total)")
        return count

    def get(self, thread_id: str) -> Optional[CleanThread]:
        return self.threads_by_id.get(thread_id)

    def update(self, thread_id: str, **changes) -> Optional[CleanThread]:
        """Apply field changes to a stored thread, returns the new record or None"""
        thread = self.threads_by_id.get(thread_id)
        if thread is None:
            return None

        updated = replace(thread, **changes)
        self.threads_by_id[thread_id] = updated
        return updated

    def list_threads(self, job_id: Optional[str] = None) -> List[CleanThread]:
        """Threads for a job (or all), newest first"""
        threads = [
            thread for thread in self.threads_by_id.values()
            if job_id is None or thread.job_id == job_id
        ]
        return sorted(threads, key=lambda t: t.date, reverse=True)

    def clear(self) -> None:
        self.threads_by_id.clear()
