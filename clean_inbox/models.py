"""
Shared data models for Clean Inbox
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


# Server-side action states written by the cleanup backend
STATUS_PROCESSING = "processing"
STATUS_APPLYING = "applying"
STATUS_COMPLETED = "completed"


class CleanStatus(str, Enum):
    """Display state of a thread in the clean view"""
    ARCHIVED = "archived"
    ARCHIVING = "archiving"
    KEEP = "keep"
    LABELLED = "labelled"


@dataclass
class CleanThread:
    """A thread touched by a cleanup run"""
    thread_id: str
    subject: str
    sender: str
    date: datetime
    archive: bool = False
    label: Optional[str] = None
    status: Optional[str] = None
    job_id: Optional[str] = None
    snippet: str = ""

    def __post_init__(self):
        # Stored dates are always UTC-aware so records sort against each other
        if self.date.tzinfo is None:
            self.date = self.date.replace(tzinfo=timezone.utc)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CleanThread":
        """Build from a stored record, accepting both snake_case and camelCase keys"""
        date = data.get('date')
        if isinstance(date, str):
            date = datetime.fromisoformat(date.replace('Z', '+00:00'))

        return cls(
            thread_id=data.get('thread_id') or data['threadId'],
            subject=data.get('subject') or '(No Subject)',
            sender=data.get('sender') or data.get('from') or '(Unknown Sender)',
            date=date or datetime.now(timezone.utc),
            archive=data.get('archive') is True,
            label=data.get('label') or None,
            status=data.get('status'),
            job_id=data.get('job_id') or data.get('jobId'),
            snippet=data.get('snippet') or '',
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['date'] = self.date.isoformat()
        return data


@dataclass
class EmailForLLM:
    """A single email message prepared for a prompt"""
    id: str
    sender: str
    subject: str
    content: str
    to: Optional[str] = None
    reply_to: Optional[str] = None
    cc: Optional[str] = None
    date: Optional[datetime] = None


@dataclass
class UserEmailWithAI:
    """The mailbox owner and their AI preferences"""
    email: str
    about: Optional[str] = None
    ai_provider: Optional[str] = None
    ai_model: Optional[str] = None
    ai_api_key: Optional[str] = None


@dataclass
class ActionError:
    """Failed result of a server action, carries a user-facing message"""
    error: str


ActionResult = Union[Dict[str, Any], ActionError]


def is_action_error(result: Any) -> bool:
    """True for an ActionError or a decoded {'error': ...} payload"""
    if isinstance(result, ActionError):
        return True
    return isinstance(result, Mapping) and 'error' in result


def action_error_message(result: Any) -> str:
    if isinstance(result, ActionError):
        return result.error
    return str(result.get('error'))


@dataclass
class Badge:
    """Status badge shown at the end of a row"""
    text: str
    color: str
    undoable: bool = False


@dataclass
class EmailItemView:
    """Everything a renderer needs to draw one row of the clean view"""
    thread_id: str
    subject: str
    sender: str
    date: str
    status: CleanStatus
    pending: bool
    badge: Badge
    circle_color: str
    link: str
    tones: List[str] = field(default_factory=list)
