"""
Tests for the clean view status projection
"""

import pytest
from datetime import datetime

from clean_inbox.models import CleanStatus
from clean_inbox.status import (
    build_email_item,
    derive_status,
    is_pending,
    is_undoable,
    row_tones,
    status_badge,
)
from tests.helpers import make_clean_thread


# === Derive Status Tests ===

class TestDeriveStatus:
    """Tests for derive_status priority order"""

    def test_archive_processing_is_archiving(self):
        thread = make_clean_thread('t', archive=True, status='processing')
        assert derive_status(thread) is CleanStatus.ARCHIVING

    @pytest.mark.parametrize('status', [None, 'applying', 'completed', 'something-else'])
    def test_archive_other_status_is_archived(self, status):
        thread = make_clean_thread('t', archive=True, status=status)
        assert derive_status(thread) is CleanStatus.ARCHIVED

    def test_archive_takes_precedence_over_label(self):
        """A thread with both archive and label displays as archived"""
        thread = make_clean_thread('t', archive=True, label='Newsletter')
        assert derive_status(thread) is CleanStatus.ARCHIVED

    @pytest.mark.parametrize('status', [None, 'processing', 'applying'])
    def test_label_is_labelled_whatever_the_status(self, status):
        thread = make_clean_thread('t', label='Newsletter', status=status)
        assert derive_status(thread) is CleanStatus.LABELLED

    @pytest.mark.parametrize('label', [None, ''])
    def test_no_archive_no_label_is_keep(self, label):
        thread = make_clean_thread('t', label=label, status='processing')
        assert derive_status(thread) is CleanStatus.KEEP


class TestIsPending:
    """Tests for is_pending predicate"""

    @pytest.mark.parametrize('status', ['processing', 'applying'])
    def test_in_flight_statuses(self, status):
        assert is_pending(make_clean_thread('t', status=status)) is True
        assert is_pending(make_clean_thread('t', label='L', status=status)) is True
        assert is_pending(make_clean_thread('t', archive=True, status=status)) is True

    @pytest.mark.parametrize('status', [None, 'completed', ''])
    def test_other_statuses(self, status):
        assert is_pending(make_clean_thread('t', archive=True, status=status)) is False

    def test_pending_label_still_labelled(self):
        """A label being applied is pending but the badge says labelled"""
        thread = make_clean_thread('t', label='Newsletter', status='applying')
        assert is_pending(thread) is True
        assert derive_status(thread) is CleanStatus.LABELLED


# === Badge Tests ===

class TestStatusBadge:
    """Tests for status_badge"""

    def test_labelled_badge_shows_label(self):
        thread = make_clean_thread('t', label='Newsletter')
        badge = status_badge(derive_status(thread), thread)
        assert badge.text == 'Newsletter'
        assert badge.color == 'yellow'
        assert badge.undoable is False

    def test_archiving_badge(self):
        thread = make_clean_thread('t', archive=True, status='processing')
        badge = status_badge(derive_status(thread), thread)
        assert badge.text == 'Archiving...'
        assert badge.color == 'green'
        assert badge.undoable is True

    def test_archived_badge(self):
        thread = make_clean_thread('t', archive=True)
        badge = status_badge(derive_status(thread), thread)
        assert badge.text == 'Archived'
        assert badge.undoable is True

    def test_keep_badge(self):
        thread = make_clean_thread('t')
        badge = status_badge(derive_status(thread), thread)
        assert badge.text == 'Keep'
        assert badge.color == 'blue'

    def test_undone_overrides_everything(self):
        thread = make_clean_thread('t', archive=True, status='processing')
        badge = status_badge(derive_status(thread), thread, undone=True)
        assert badge.text == 'Undone'
        assert badge.color == 'purple'
        assert badge.undoable is False


class TestIsUndoable:

    def test_only_archive_states(self):
        assert is_undoable(CleanStatus.ARCHIVED) is True
        assert is_undoable(CleanStatus.ARCHIVING) is True
        assert is_undoable(CleanStatus.KEEP) is False
        assert is_undoable(CleanStatus.LABELLED) is False


# === Row Projection Tests ===

class TestBuildEmailItem:
    """Tests for the full row projection"""

    def test_row_tones_combine(self):
        thread = make_clean_thread('t', archive=True, label='L', status='processing')
        assert row_tones(thread) == ['pending', 'archive', 'label']

    def test_row_tones_empty_for_keep(self):
        assert row_tones(make_clean_thread('t')) == []

    def test_build_labelled_item(self):
        thread = make_clean_thread('thread_abc', label='Newsletter', date=datetime(2020, 1, 2, 8, 0))
        item = build_email_item(thread, user_email='me@example.com')

        assert item.status is CleanStatus.LABELLED
        assert item.badge.text == 'Newsletter'
        assert item.circle_color == 'yellow'
        assert item.pending is False
        assert item.link == 'https://mail.google.com/mail/u/me@example.com/#all/thread_abc'
        assert item.date == 'Jan 2'

    def test_build_archiving_item(self):
        thread = make_clean_thread('t', archive=True, status='processing')
        item = build_email_item(thread)

        assert item.status is CleanStatus.ARCHIVING
        assert item.badge.text == 'Archiving...'
        assert item.circle_color == 'green'
        assert item.pending is True
        assert item.link == 'https://mail.google.com/mail/u/0/#all/t'
