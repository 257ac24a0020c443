"""
Status projection for the clean view
Maps a stored CleanThread to what a row should display
"""

from typing import List, Optional

from clean_inbox.models import (
    Badge,
    CleanStatus,
    CleanThread,
    EmailItemView,
    STATUS_APPLYING,
    STATUS_PROCESSING,
)
from clean_inbox.utils import format_short_date, get_gmail_url


UNDONE_BADGE = Badge(text="Undone", color="purple")

CIRCLE_COLORS = {
    CleanStatus.ARCHIVED: "green",
    CleanStatus.ARCHIVING: "green",
    CleanStatus.KEEP: "blue",
    CleanStatus.LABELLED: "yellow",
}


def derive_status(thread: CleanThread) -> CleanStatus:
    """Archive wins over label; status only matters for archived threads"""
    if thread.archive:
        if thread.status == STATUS_PROCESSING:
            return CleanStatus.ARCHIVING
        return CleanStatus.ARCHIVED

    if thread.label:
        return CleanStatus.LABELLED

    return CleanStatus.KEEP


def is_pending(thread: CleanThread) -> bool:
    """True while a server-side action is in flight, whatever the display state"""
    return thread.status in (STATUS_PROCESSING, STATUS_APPLYING)


def is_undoable(status: CleanStatus) -> bool:
    return status in (CleanStatus.ARCHIVED, CleanStatus.ARCHIVING)


def status_badge(status: CleanStatus, thread: CleanThread, undone: bool = False) -> Badge:
    """Badge for a row; a local undo overrides whatever the record says"""
    if undone:
        return UNDONE_BADGE

    if status is CleanStatus.ARCHIVING:
        return Badge(text="Archiving...", color="green", undoable=True)
    if status is CleanStatus.ARCHIVED:
        return Badge(text="Archived", color="green", undoable=True)
    if status is CleanStatus.KEEP:
        return Badge(text="Keep", color="blue")
    if status is CleanStatus.LABELLED:
        return Badge(text=thread.label or "", color="yellow")

    raise ValueError(f"Unhandled clean status: {status}")


def row_tones(thread: CleanThread) -> List[str]:
    """Highlight tones for a row, more than one can apply"""
    tones = []
    if is_pending(thread):
        tones.append("pending")
    if thread.archive:
        tones.append("archive")
    if thread.label:
        tones.append("label")
    return tones


def build_email_item(
    thread: CleanThread,
    user_email: Optional[str] = None,
    undone: bool = False
) -> EmailItemView:
    """Project a thread into a renderable row"""
    status = derive_status(thread)

    return EmailItemView(
        thread_id=thread.thread_id,
        subject=thread.subject,
        sender=thread.sender,
        date=format_short_date(thread.date),
        status=status,
        pending=is_pending(thread),
        badge=status_badge(status, thread, undone),
        circle_color=CIRCLE_COLORS[status],
        link=get_gmail_url(thread.thread_id, user_email),
        tones=row_tones(thread),
    )
