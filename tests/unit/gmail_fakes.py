"""In-memory stand-ins for the discovery-built Gmail service."""

import base64
from unittest.mock import MagicMock

from googleapiclient.errors import HttpError


def encode(text: str) -> str:
    """Encode text the way the Gmail API encodes body data (base64url)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def http_error(status: int = 404, message: str = "Requested entity was not found.") -> HttpError:
    resp = MagicMock(status=status, reason="error")
    content = ('{"error": {"code": %d, "message": "%s"}}' % (status, message)).encode("utf-8")
    return HttpError(resp, content)


def make_request(result=None, error=None):
    """A prepared request whose execute() returns `result` or raises `error`."""
    request = MagicMock()
    if error is not None:
        request.execute.side_effect = error
    else:
        request.execute.return_value = result
    return request


def make_message(message_id, thread_id=None, subject="", sender="", to="", date="",
                 snippet="", label_ids=None, payload=None):
    headers = []
    for name, value in (("From", sender), ("To", to), ("Subject", subject), ("Date", date)):
        if value:
            headers.append({"name": name, "value": value})
    payload = dict(payload or {"mimeType": "text/plain", "body": {"size": 0}})
    payload["headers"] = headers
    return {
        "id": message_id,
        "threadId": thread_id or f"thread-{message_id}",
        "labelIds": label_ids or [],
        "snippet": snippet,
        "payload": payload,
    }


class FakeGmail:
    """
    Fake Gmail service backed by dicts.

    Args:
        pages: Lists of message IDs, one list per page of users.messages.list
        messages: Message ID -> message dict (or an exception to raise)
        labels: Label dicts with 'id' and 'name'
        email: Address returned by users.getProfile
    """

    def __init__(self, pages=None, messages=None, labels=None, email="me@example.com"):
        self.pages = pages if pages is not None else [[]]
        self.messages = messages or {}
        self.labels = labels or []
        self.email = email
        self.profile_error = None
        self.labels_error = None
        self.list_error = None

        self.service = MagicMock()
        users = self.service.users.return_value
        users.getProfile.side_effect = self._get_profile
        users.labels.return_value.list.side_effect = self._list_labels
        users.messages.return_value.list.side_effect = self._list_messages
        users.messages.return_value.get.side_effect = self._get_message

    @property
    def list_calls(self):
        return self.service.users.return_value.messages.return_value.list

    @property
    def get_calls(self):
        return self.service.users.return_value.messages.return_value.get

    @property
    def labels_calls(self):
        return self.service.users.return_value.labels.return_value.list

    @property
    def profile_calls(self):
        return self.service.users.return_value.getProfile

    def _get_profile(self, userId):
        return make_request({"emailAddress": self.email}, self.profile_error)

    def _list_labels(self, userId):
        return make_request({"labels": self.labels}, self.labels_error)

    def _list_messages(self, userId, maxResults, q=None, labelIds=None, pageToken=None):
        if self.list_error is not None:
            return make_request(error=self.list_error)
        index = int(pageToken.split("-")[1]) if pageToken else 0
        ids = self.pages[index]
        response = {"resultSizeEstimate": sum(len(p) for p in self.pages)}
        if ids:
            response["messages"] = [{"id": i, "threadId": f"thread-{i}"} for i in ids]
        if index + 1 < len(self.pages):
            response["nextPageToken"] = f"page-{index + 1}"
        return make_request(response)

    def _get_message(self, userId, id, format, metadataHeaders=None):
        message = self.messages.get(id)
        if message is None:
            return make_request(error=http_error(404))
        if isinstance(message, Exception):
            return make_request(error=message)
        return make_request(message)


LABELS = [
    {"id": "INBOX", "name": "INBOX", "type": "system"},
    {"id": "UNREAD", "name": "UNREAD", "type": "system"},
    {"id": "Label_1", "name": "Work", "type": "user"},
    {"id": "Label_2", "name": "My Label", "type": "user"},
]
