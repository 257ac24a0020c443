#!/usr/bin/env python3
"""
Clean Inbox Web Application
FastAPI server with WebSocket support for thread status updates
"""

import asyncio
import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Set, Optional, List

from clean_inbox.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from clean_inbox.ai.extract_from_history import ai_extract_from_email_history
from clean_inbox.clean_service import CleanService, load_threads
from clean_inbox.gmail_service import GmailService
from clean_inbox.models import EmailForLLM, UserEmailWithAI, action_error_message, is_action_error
from clean_inbox.store import ThreadStore

logger.info(f"Starting Clean Inbox with log level: {settings.log_level}")

app = FastAPI(title="Clean Inbox", description="Review and undo inbox cleanup actions")

# Global state
gmail_service = GmailService()
thread_store = ThreadStore()
clean_service = CleanService(gmail_service, thread_store)


class ConnectionManager:
    """Manage WebSocket connections"""

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)

    async def broadcast(self, message_type: str, data: Dict):
        """Broadcast message to all connected clients"""
        message = {"type": message_type, "data": data}
        disconnected = set()

        for connection in self.active_connections:
            try:
                await connection.send_text(json.dumps(message))
                await asyncio.sleep(0)
            except (WebSocketDisconnect, RuntimeError) as error:
                logger.debug(f"Dropping websocket after send failure: {error}")
                disconnected.add(connection)

        for conn in disconnected:
            self.active_connections.discard(conn)


# WebSocket connection manager
manager = ConnectionManager()


async def progress_callback(message_type: str, data: Dict):
    """Forward thread updates to WebSocket clients"""
    await manager.broadcast(message_type, data)


clean_service.set_progress_callback(progress_callback)


# Request/Response models
class UndoRequest(BaseModel):
    thread_id: str
    archived: bool
    job_id: Optional[str] = None


class CleanThreadIn(BaseModel):
    """Accepts the backend's camelCase record keys as well as snake_case"""
    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(alias="threadId")
    subject: str = ""
    sender: str = Field(default="", alias="from")
    date: datetime
    archive: bool = False
    label: Optional[str] = None
    status: Optional[str] = None
    job_id: Optional[str] = Field(default=None, alias="jobId")
    snippet: str = ""


class EmailIn(BaseModel):
    id: str
    sender: str
    subject: str = ""
    content: str = ""
    to: Optional[str] = None
    reply_to: Optional[str] = None
    cc: Optional[str] = None
    date: Optional[datetime] = None


class UserIn(BaseModel):
    email: str
    about: Optional[str] = None
    ai_provider: Optional[str] = None
    ai_model: Optional[str] = None


class HistoryRequest(BaseModel):
    current_thread_messages: List[EmailIn]
    historical_messages: List[EmailIn] = []
    user: UserIn


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# === Authentication ===

@app.get("/auth/status")
def check_auth_status():
    """Check if already authenticated"""
    creds_path = Path(gmail_service.credentials_path)

    return {
        "authenticated": bool(gmail_service.service) or gmail_service.authenticate(),
        "credentials_path": str(creds_path.absolute()) if creds_path.exists() else None
    }


@app.post("/auth/upload")
def upload_credentials(credentials: dict):
    """Handle uploaded credentials and start OAuth flow"""
    logger.info("Received credentials upload request")

    creds_path = Path(gmail_service.credentials_path)
    creds_path.parent.mkdir(parents=True, exist_ok=True)
    creds_path.write_text(json.dumps(credentials))
    logger.info(f"Saved credentials to {creds_path.absolute()}")

    try:
        auth_url = gmail_service.create_oauth_flow(settings.oauth_redirect_uri)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Error in upload_credentials: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.debug(f"Generated auth URL: {auth_url[:50]}...")
    return {
        "status": "redirect",
        "auth_url": auth_url,
        "message": "Redirect to Google OAuth",
        "credentials_path": str(creds_path.absolute())
    }


@app.get("/oauth/callback")
def oauth_callback(code: str = None, error: str = None):
    """Handle OAuth2 callback from Google"""
    if error:
        return RedirectResponse(url="/?auth_error=" + error)

    if not code:
        return RedirectResponse(url="/?auth_error=no_code")

    if gmail_service.complete_oauth_flow(code):
        return RedirectResponse(url="/?auth_success=true")
    return RedirectResponse(url="/?auth_error=oauth_failed")


# === Clean View ===

@app.get("/clean/threads")
def get_clean_threads(user_email: Optional[str] = None, job_id: Optional[str] = None):
    """Rendered rows for the clean view"""
    try:
        items = clean_service.list_items(user_email=user_email, job_id=job_id)
        return {"threads": [asdict(item) for item in items], "total": len(items)}
    except Exception as e:
        logger.error(f"Error listing clean threads: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to list threads: {str(e)}")


@app.put("/clean/threads")
def put_clean_threads(threads: List[CleanThreadIn]):
    """Store thread records written by the cleanup job"""
    try:
        stored = load_threads(thread_store, [t.model_dump(by_alias=False) for t in threads])
    except Exception as e:
        logger.error(f"Error storing clean threads: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to store threads: {str(e)}")

    return {"stored": len(stored)}


@app.post("/clean/undo")
async def undo_clean_inbox(request: UndoRequest):
    """Undo the clean action on a thread; errors come back as {'error': ...}"""
    result = await clean_service.undo_clean_inbox_action(
        thread_id=request.thread_id,
        archived=request.archived,
        job_id=request.job_id
    )

    if is_action_error(result):
        return {"error": action_error_message(result)}
    return result


# === Knowledge ===

@app.post("/knowledge/history")
async def extract_history(request: HistoryRequest):
    """Summarise historical threads for drafting a reply"""
    summary = await ai_extract_from_email_history(
        current_thread_messages=[EmailForLLM(**m.model_dump()) for m in request.current_thread_messages],
        historical_messages=[EmailForLLM(**m.model_dump()) for m in request.historical_messages],
        user=UserEmailWithAI(**request.user.model_dump()),
    )
    return {"summary": summary}


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for thread updates"""
    await manager.connect(websocket)

    try:
        while True:
            # Keep connection alive
            await websocket.receive_text()

    except WebSocketDisconnect:
        manager.disconnect(websocket)


# To run this application, use:
# uv run python -m uvicorn clean_inbox.main:app --reload
