"""
Undo Action Client - per-row view state for the clean view
Each row owns its own 'undone' flag; nothing is shared between rows
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

import requests

from clean_inbox.models import (
    ActionError,
    ActionResult,
    CleanThread,
    EmailItemView,
    action_error_message,
    is_action_error,
)
from clean_inbox.status import build_email_item, derive_status, is_undoable


logger = logging.getLogger(__name__)

UndoAction = Callable[[str, bool], Awaitable[ActionResult]]
ErrorNotifier = Callable[[str], Any]


def toast_error(description: str) -> None:
    """Default transient notification: just log it"""
    logger.warning(f"Undo failed: {description}")


class ThreadRow:
    """A rendered row of the clean view with its local undo state"""

    def __init__(
        self,
        thread: CleanThread,
        undo_action: UndoAction,
        user_email: Optional[str] = None,
        notify_error: ErrorNotifier = toast_error
    ):
        self.thread = thread
        self.undo_action = undo_action
        self.user_email = user_email
        self.notify_error = notify_error
        self.undone = False

    def refresh(self, thread: CleanThread) -> None:
        """Swap in a re-fetched record; the undone flag survives"""
        self.thread = thread

    @property
    def can_undo(self) -> bool:
        return not self.undone and is_undoable(derive_status(self.thread))

    def render(self) -> EmailItemView:
        return build_email_item(self.thread, self.user_email, undone=self.undone)

    async def undo(self) -> Optional[ActionError]:
        """Revert the archive once; returns the error when the action fails"""
        if self.undone:
            return None

        result = await self.undo_action(self.thread.thread_id, self.thread.archive)

        if is_action_error(result):
            message = action_error_message(result)
            notified = self.notify_error(message)
            if inspect.isawaitable(notified):
                await notified
            return result if isinstance(result, ActionError) else ActionError(error=message)

        self.undone = True
        logger.debug(f"Thread {self.thread.thread_id} marked undone")
        return None


class HttpUndoAction:
    """Undo action that calls the server's /clean/undo endpoint"""

    def __init__(self, base_url: str, job_id: Optional[str] = None, timeout: int = 30):
        self.base_url = base_url.rstrip('/')
        self.job_id = job_id
        self.timeout = timeout

    async def __call__(self, thread_id: str, archived: bool) -> ActionResult:
        payload = {"thread_id": thread_id, "archived": archived, "job_id": self.job_id}

        try:
            response = await asyncio.to_thread(
                lambda: requests.post(
                    f"{self.base_url}/clean/undo",
                    json=payload,
                    timeout=self.timeout
                )
            )
        except requests.RequestException as error:
            logger.error(f"Undo request for thread {thread_id} failed: {error}")
            return ActionError(error=f"Network failure: {error}")

        try:
            data = response.json()
        except ValueError:
            return ActionError(error=f"Unexpected response from server ({response.status_code})")

        if response.status_code >= 400 and not is_action_error(data):
            detail = data.get('detail') if isinstance(data, dict) else None
            return ActionError(error=str(detail or f"Server error {response.status_code}"))

        return data
