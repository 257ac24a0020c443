"""
Data builders shared by the test modules
"""

from datetime import datetime
from typing import Optional

from clean_inbox.models import CleanThread, EmailForLLM


def make_clean_thread(
    thread_id: str,
    archive: bool = False,
    label: Optional[str] = None,
    status: Optional[str] = None,
    job_id: Optional[str] = 'job_1',
    date: Optional[datetime] = None
) -> CleanThread:
    """Helper to create a CleanThread as the cleanup job would store it"""
    return CleanThread(
        thread_id=thread_id,
        subject=f'Subject {thread_id}',
        sender=f'Sender <{thread_id}@example.com>',
        date=date or datetime(2024, 3, 5, 9, 30),
        archive=archive,
        label=label,
        status=status,
        job_id=job_id,
    )


def make_email(email_id: str, content: str = 'Hello there', sender: str = 'alice@example.com') -> EmailForLLM:
    """Helper to create an email prepared for a prompt"""
    return EmailForLLM(
        id=email_id,
        sender=sender,
        subject=f'Subject {email_id}',
        content=content,
        to='me@example.com',
        date=datetime(2024, 3, 5, 9, 30),
    )
