"""
Formatting helpers shared by the clean view and the AI prompts
"""

import re
from datetime import datetime
from typing import Optional

from clean_inbox.models import EmailForLLM


GMAIL_BASE_URL = 'https://mail.google.com/mail/u'


def get_gmail_base_url(email_address: Optional[str] = None) -> str:
    return f"{GMAIL_BASE_URL}/{email_address or 0}"


def get_gmail_url(message_or_thread_id: str, email_address: Optional[str] = None) -> str:
    """Deep link to a thread in the Gmail web client"""
    return f"{get_gmail_base_url(email_address)}/#all/{message_or_thread_id}"


def format_short_date(
    date: datetime,
    include_year: bool = False,
    lowercase: bool = False,
    now: Optional[datetime] = None
) -> str:
    """Time of day for today's dates, 'Oct 19' otherwise"""
    now = now or datetime.now(date.tzinfo)

    if date.date() == now.date():
        # "3:05 PM" without a leading zero on the hour
        hour = date.hour % 12 or 12
        text = f"{hour}:{date.minute:02d} {'AM' if date.hour < 12 else 'PM'}"
        return text.lower() if lowercase else text

    text = f"{date.strftime('%b')} {date.day}"
    if include_year:
        text += f", {date.year}"
    return text


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def remove_excessive_whitespace(text: str) -> str:
    """Collapse runs of blank lines and spaces left over from HTML-to-text conversion"""
    text = re.sub(r'[ \t\u00a0]+', ' ', text)
    text = re.sub(r'\n\s*\n+', '\n\n', text)
    return text.strip()


def stringify_email(email: EmailForLLM, max_length: int) -> str:
    """Render an email as tagged text for a prompt, body truncated to max_length"""
    parts = [
        f"<from>{email.sender}</from>",
        f"<replyTo>{email.reply_to}</replyTo>" if email.reply_to else None,
        f"<to>{email.to}</to>" if email.to else None,
        f"<cc>{email.cc}</cc>" if email.cc else None,
        f"<date>{email.date.isoformat()}</date>" if email.date else None,
        f"<subject>{email.subject}</subject>",
        f"<body>{truncate(remove_excessive_whitespace(email.content or ''), max_length)}</body>",
    ]
    return "\n".join(part for part in parts if part)
