"""
Shared test fixtures for Clean Inbox tests
"""

import pytest
from typing import Dict, List, Optional, Set
from googleapiclient.errors import HttpError

from clean_inbox.gmail_service import GmailService
from clean_inbox.clean_service import CleanService
from clean_inbox.models import CleanThread, UserEmailWithAI
from clean_inbox.store import ThreadStore
from tests.helpers import make_clean_thread


# === Mock Gmail API Service ===

class MockExecute:
    """Mock for the .execute() call that returns stored data"""
    def __init__(self, data):
        self._data = data

    def execute(self):
        return self._data


class MockHttpResponse:
    """Mock HTTP response for HttpError"""
    def __init__(self, status: int, reason: str):
        self.status = status
        self.reason = reason


class MockThreads:
    """Mock for users().threads()"""
    def __init__(self, modified: List[Dict], fail_threads: Set[str]):
        self._modified = modified
        self._fail_threads = fail_threads

    def modify(self, userId: str, id: str, body: dict):
        if id in self._fail_threads:
            resp = MockHttpResponse(404, 'Not Found')
            raise HttpError(resp=resp, content=b'Thread not found')
        self._modified.append({'id': id, **body})
        return MockExecute({'id': id, 'labelIds': body.get('addLabelIds', [])})


class MockUsers:
    """Mock for service.users()"""
    def __init__(self, modified: List[Dict], fail_threads: Set[str]):
        self._threads = MockThreads(modified, fail_threads)

    def threads(self):
        return self._threads


class MockGmailApi:
    """Mock Gmail API resource that records thread modifications"""

    def __init__(self, fail_threads: Optional[Set[str]] = None):
        self._modified: List[Dict] = []
        self._fail_threads = fail_threads or set()

    def users(self):
        return MockUsers(self._modified, self._fail_threads)

    @property
    def modified(self) -> List[Dict]:
        """Bodies of every threads().modify call, in order"""
        return self._modified


# === Fixtures ===

@pytest.fixture
def sample_threads() -> List[CleanThread]:
    """One thread in each display state"""
    return [
        make_clean_thread('thread_001', archive=True, status='completed'),
        make_clean_thread('thread_002', archive=True, status='processing'),
        make_clean_thread('thread_003', label='Newsletter'),
        make_clean_thread('thread_004'),
        make_clean_thread('thread_005', label='Receipts', status='applying', job_id='job_2'),
    ]


@pytest.fixture
def thread_store(sample_threads) -> ThreadStore:
    store = ThreadStore()
    store.upsert_many(sample_threads)
    return store


@pytest.fixture
def mock_gmail_api() -> MockGmailApi:
    return MockGmailApi()


@pytest.fixture
def mock_gmail_api_with_failures() -> MockGmailApi:
    """Gmail API that fails to modify thread_001"""
    return MockGmailApi(fail_threads={'thread_001'})


@pytest.fixture
def gmail_service(mock_gmail_api, tmp_path) -> GmailService:
    """Authenticated GmailService backed by the mock API"""
    service = GmailService(
        credentials_path=str(tmp_path / 'credentials.json'),
        token_path=str(tmp_path / 'token.json')
    )
    service.service = mock_gmail_api
    return service


@pytest.fixture
def clean_service(gmail_service, thread_store) -> CleanService:
    return CleanService(gmail_service, thread_store)


@pytest.fixture
def user() -> UserEmailWithAI:
    return UserEmailWithAI(email='me@example.com', about='Product manager at Acme')
