"""
Clean Service - server-side actions for the clean view
"""

import logging
from typing import Callable, Dict, List, Optional

from googleapiclient.errors import HttpError

from clean_inbox.gmail_service import GmailService
from clean_inbox.models import ActionError, ActionResult, CleanThread, EmailItemView, STATUS_COMPLETED
from clean_inbox.status import build_email_item
from clean_inbox.store import ThreadStore


logger = logging.getLogger(__name__)


class CleanService:
    """Reads stored cleanup results and reverses archive actions"""

    def __init__(
        self,
        gmail_service: GmailService,
        store: ThreadStore,
        progress_callback: Optional[Callable] = None
    ):
        self.gmail_service = gmail_service
        self.store = store
        self.progress_callback = progress_callback

    def set_progress_callback(self, callback: Callable[[str, Dict], None]):
        """Set callback for thread update events"""
        self.progress_callback = callback

    # === Clean View ===

    def list_items(self, user_email: Optional[str] = None, job_id: Optional[str] = None) -> List[EmailItemView]:
        """Render every stored thread, newest first"""
        return [
            build_email_item(thread, user_email)
            for thread in self.store.list_threads(job_id)
        ]

    # === Undo ===

    async def undo_clean_inbox_action(
        self,
        thread_id: str,
        archived: bool,
        job_id: Optional[str] = None
    ) -> ActionResult:
        """Move an archived thread back to the inbox and mark its record"""
        if not self.gmail_service.service:
            return ActionError(error="Not authenticated")

        # Labels are left in place; only an archive is reversed
        if archived:
            try:
                await self.gmail_service.move_to_inbox(thread_id)
            except HttpError as error:
                logger.error(f"Error moving thread {thread_id} back to inbox: {error}")
                return ActionError(error=f"Failed to undo archive: {self._describe_http_error(error)}")

        updated = self.store.update(thread_id, archive=False, status=STATUS_COMPLETED)
        if updated is None:
            logger.debug(f"Undo for thread {thread_id} has no stored record to update")
        elif job_id and updated.job_id != job_id:
            logger.warning(f"Undo for thread {thread_id} requested with job {job_id}, stored under {updated.job_id}")

        logger.info(f"Undid clean action for thread {thread_id} (archived={archived})")

        await self._report_progress("thread_updated", {
            "thread_id": thread_id,
            "thread": updated.to_dict() if updated else None,
        })

        return {"success": True}

    # === Progress ===

    async def _report_progress(self, event: str, data: Dict) -> None:
        """Send update if callback is set"""
        if self.progress_callback:
            await self.progress_callback(event, data)

    # === Utilities ===

    @staticmethod
    def _describe_http_error(error: HttpError) -> str:
        """Short human-readable reason for a Gmail API error"""
        status = getattr(error.resp, 'status', None)
        reason = getattr(error.resp, 'reason', None)
        if status and reason:
            return f"{status} {reason}"
        return str(error)


def load_threads(store: ThreadStore, records: List[Dict]) -> List[CleanThread]:
    """Parse raw cleanup records and store them"""
    threads = [CleanThread.from_dict(record) for record in records]
    store.upsert_many(threads)
    return threads
