"""
Unit test configuration.

Unit tests run against FakeGmail instead of a real mailbox, so they need no
profile, token, or network access.
"""

import pytest

from gmail_fakes import FakeGmail, LABELS, encode, make_message


@pytest.fixture
def two_message_mailbox():
    """Mailbox with two messages in INBOX."""
    messages = {
        "m1": make_message(
            "m1", subject="Quarterly report", sender="alice@example.com",
            to="me@example.com", date="Mon, 2 Jun 2025 10:00:00 +0000",
            snippet="Please find attached", label_ids=["INBOX", "Label_1"],
            payload={"mimeType": "text/plain", "body": {"data": encode("Report body")}},
        ),
        "m2": make_message(
            "m2", subject="Lunch?", sender="bob@example.com",
            to="me@example.com", date="Tue, 3 Jun 2025 12:00:00 +0000",
            snippet="Are you free", label_ids=["INBOX", "UNREAD"],
            payload={"mimeType": "text/plain", "body": {"data": encode("Lunch body")}},
        ),
    }
    return FakeGmail(pages=[["m1", "m2"]], messages=messages, labels=LABELS)
