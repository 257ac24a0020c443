"""
Summarise historical email threads to help draft a reply to the current one
"""

import logging
from dataclasses import replace
from typing import List, Optional

from pydantic import BaseModel, Field

from clean_inbox.llm import chat_completion_object, get_economy_model
from clean_inbox.models import EmailForLLM, UserEmailWithAI
from clean_inbox.utils import stringify_email


logger = logging.getLogger("clean_inbox.EmailHistoryExtractor")

MAX_EMAIL_LENGTH = 10000

SYSTEM_PROMPT = """You are an email history analysis agent. Your task is to analyze the provided historical email threads and extract relevant information that would be helpful for drafting a response to the current email thread.

Your task:
1. Analyze the historical email threads to understand relevant past context and interactions
2. Identify key points, commitments, questions, and unresolved items from previous conversations
3. Extract any relevant dates, deadlines, or time-sensitive information mentioned in past exchanges
4. Note any specific preferences or communication patterns shown in previous exchanges

Provide a concise summary (max 500 characters) that captures the most important historical context needed for drafting a response to the current thread. Focus on:
- Key unresolved points or questions from past exchanges
- Any commitments or promises made in previous conversations
- Important dates or deadlines established in past emails
- Notable preferences or patterns in communication"""


class HistoryExtraction(BaseModel):
    summary: str = Field(
        description=(
            "A concise summary of relevant historical context, including key points, "
            "commitments, deadlines, and communication patterns from past conversations"
        )
    )


def _join_messages(messages: List[EmailForLLM]) -> str:
    return "\n---\n".join(stringify_email(m, MAX_EMAIL_LENGTH) for m in messages)


def build_user_prompt(
    current_thread_messages: List[EmailForLLM],
    historical_messages: List[EmailForLLM],
    user: UserEmailWithAI
) -> str:
    if historical_messages:
        history = f"Historical Email Threads:\n{_join_messages(historical_messages)}"
    else:
        history = "No historical email threads available."

    if user.about:
        user_info = f"<user_info>\n<about>{user.about}</about>\n<email>{user.email}</email>\n</user_info>"
    else:
        user_info = f"<user_info>\n<email>{user.email}</email>\n</user_info>"

    return f"""Current Email Thread:
{_join_messages(current_thread_messages)}

{history}

{user_info}

Analyze the historical email threads and extract any relevant information that would be helpful for drafting a response to the current email thread. Provide a concise summary of the key historical context."""


async def ai_extract_from_email_history(
    current_thread_messages: List[EmailForLLM],
    historical_messages: List[EmailForLLM],
    user: UserEmailWithAI
) -> Optional[str]:
    """Summary of relevant history, or None when there is none or the call fails"""
    try:
        logger.info(
            f"Extracting information from email history "
            f"(current: {len(current_thread_messages)}, historical: {len(historical_messages)})"
        )

        if not historical_messages:
            return None

        system = SYSTEM_PROMPT
        prompt = build_user_prompt(current_thread_messages, historical_messages, user)

        logger.debug(f"Input system={system!r} prompt={prompt!r}")

        provider, model = get_economy_model(user)
        logger.info(f"Using economy model for email history extraction: {provider}/{model}")

        result = await chat_completion_object(
            system=system,
            prompt=prompt,
            schema=HistoryExtraction,
            usage_label="Email history extraction",
            user_ai=replace(user, ai_provider=provider, ai_model=model),
            user_email=user.email,
        )

        logger.debug(f"Output {result.object!r}")

        return result.object.summary
    except Exception as error:
        logger.error(f"Failed to extract information from email history: {error}", exc_info=True)
        return None
