#!/usr/bin/env python3
"""
Gmail Service - Facade for Gmail operations
Handles authentication and the thread mutations the clean view needs
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import List, Dict, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from clean_inbox.config import settings


logger = logging.getLogger(__name__)

# If modifying these scopes, delete the file token.json.
SCOPES = ['https://www.googleapis.com/auth/gmail.modify']

INBOX_LABEL_ID = 'INBOX'


class GmailService:
    """Facade for Gmail operations - handles auth and thread label changes"""

    def __init__(self, credentials_path: Optional[str] = None, token_path: Optional[str] = None):
        self.credentials_path = credentials_path or settings.gmail_credentials_path
        self.token_path = token_path or settings.gmail_token_path
        self.service = None
        self.flow = None

    # === Authentication ===

    def create_oauth_flow(self, redirect_uri: str = None) -> str:
        """Create OAuth2 flow and return authorization URL"""
        if not os.path.exists(self.credentials_path):
            raise FileNotFoundError("Credentials file not found. Please upload credentials.json first.")

        self.flow = Flow.from_client_secrets_file(
            self.credentials_path,
            scopes=SCOPES,
            redirect_uri=redirect_uri or settings.oauth_redirect_uri
        )

        auth_url, _ = self.flow.authorization_url(
            access_type='offline',
            include_granted_scopes='true',
            prompt='consent'
        )

        return auth_url

    def complete_oauth_flow(self, authorization_code: str) -> bool:
        """Complete OAuth flow with authorization code"""
        if not self.flow:
            logger.error("OAuth flow not initialized. Call create_oauth_flow first.")
            return False

        try:
            self.flow.fetch_token(code=authorization_code)

            creds = self.flow.credentials
            token_path = Path(self.token_path)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json())

            self.service = build('gmail', 'v1', credentials=creds)
            logger.info("Successfully authenticated with Gmail via OAuth")
            return True

        except Exception as error:
            logger.error(f"OAuth authentication failed: {error}")
            return False

    def authenticate(self) -> bool:
        """Check if already authenticated and refresh credentials if needed"""
        token_path = Path(self.token_path)

        if not token_path.exists():
            logger.info("No existing token found - user needs to authenticate via OAuth")
            return False

        try:
            creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)

            if not creds or not creds.valid:
                if creds and creds.expired and creds.refresh_token:
                    logger.info("Refreshing expired credentials")
                    creds.refresh(Request())
                    token_path.write_text(creds.to_json())
                else:
                    logger.warning("Credentials invalid and cannot be refreshed - user needs to re-authenticate")
                    return False

            self.service = build('gmail', 'v1', credentials=creds)
            logger.info("Successfully authenticated with existing credentials")
            return True

        except Exception as error:
            logger.error(f"Authentication failed: {error}")
            return False

    # === Thread Mutations ===

    async def modify_thread(
        self,
        thread_id: str,
        add_label_ids: Optional[List[str]] = None,
        remove_label_ids: Optional[List[str]] = None
    ) -> Dict:
        """Add/remove labels on a thread; HttpError propagates to the caller"""
        if not self.service:
            raise RuntimeError("Not authenticated. Call authenticate() first.")

        body = {
            'addLabelIds': add_label_ids or [],
            'removeLabelIds': remove_label_ids or []
        }

        return await asyncio.to_thread(
            lambda: self.service.users().threads().modify(
                userId='me',
                id=thread_id,
                body=body
            ).execute()
        )

    async def move_to_inbox(self, thread_id: str) -> Dict:
        """Reverse an archive by putting the INBOX label back"""
        logger.debug(f"Moving thread {thread_id} back to inbox")
        return await self.modify_thread(thread_id, add_label_ids=[INBOX_LABEL_ID])
