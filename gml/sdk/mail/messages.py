"""Gmail message listing and retrieval."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from ..exceptions import FetchError
from ..timing import Deadline
from .body import extract_body
from .fields import METADATA_HEADERS, needs_full_fetch
from .labels import LabelIndex, fetch_label_index, map_label_ids_to_names, resolve_label_ids
from .service import execute_request

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500

# Header name -> output key for the headers gml projects
HEADER_FIELDS = {
    'from': 'from',
    'to': 'to',
    'subject': 'subject',
    'date': 'date',
}


def get_user_email(service: Any, deadline: Optional[Deadline] = None) -> str:
    """Get the email address of the authenticated account."""
    profile = execute_request(
        service.users().getProfile(userId='me'),
        "unable to get user profile",
        deadline,
    )
    return profile.get('emailAddress', '')


def build_mail_url(email: str, thread_id: str) -> str:
    """Build a Gmail web UI link to a thread."""
    return f"https://mail.google.com/mail/?authuser={email}#all/{thread_id}"


def list_message_ids(
    service: Any,
    query: Optional[str] = None,
    label_ids: Optional[List[str]] = None,
    max_results: int = 10,
    deadline: Optional[Deadline] = None,
) -> List[str]:
    """
    Collect the IDs of all messages matching a query and label filter.

    Follows nextPageToken until the server stops returning one; max_results
    only controls the page size of each request.

    Raises:
        FetchError: If any page request fails
    """
    message_ids = []
    page_token = None

    while True:
        list_kwargs = {"userId": "me", "maxResults": max_results}
        if query:
            list_kwargs["q"] = query
        if label_ids:
            list_kwargs["labelIds"] = label_ids
        if page_token:
            list_kwargs["pageToken"] = page_token

        results = execute_request(
            service.users().messages().list(**list_kwargs),
            "unable to retrieve messages",
            deadline,
        )
        page = results.get("messages", [])
        message_ids.extend(message['id'] for message in page)
        logger.debug(f"Fetched page of {len(page)} message IDs ({len(message_ids)} total)")

        page_token = results.get("nextPageToken")
        if not page_token:
            break

    return message_ids


def list_messages(
    service: Any,
    fields: Set[str],
    query: Optional[str] = None,
    labels: Optional[Iterable[str]] = None,
    max_results: int = 10,
    deadline: Optional[Deadline] = None,
) -> List[Dict[str, Any]]:
    """
    List messages matching the given filters, projected onto the selected fields.

    Args:
        service: Gmail API service object
        fields: Field names to populate (see parse_fields)
        query: Gmail search query (e.g. "from:someone@example.com")
        labels: Label names or IDs to filter by; all must match a label
        max_results: Page size for each list request (1-500)
        deadline: Optional deadline checked before every API call

    Returns:
        List of message dicts containing only the requested, non-empty fields.
        An empty list means no messages matched.

    Raises:
        LabelNotFoundError: If a label filter matches no label
        FetchError: If the profile, label, or listing calls fail
    """
    labels = list(labels or [])

    user_email = None
    if "url" in fields:
        user_email = get_user_email(service, deadline)

    label_index = None
    if labels or "labels" in fields:
        label_index = fetch_label_index(service, deadline)

    label_ids = resolve_label_ids(label_index, labels) if labels else []
    if label_ids:
        logger.debug(f"Resolved label filters {labels} to {label_ids}")

    message_ids = list_message_ids(
        service, query=query, label_ids=label_ids, max_results=max_results, deadline=deadline
    )
    if not message_ids:
        logger.debug("No messages found matching the criteria.")
        return []

    full = needs_full_fetch(fields)
    messages = []
    for message_id in message_ids:
        try:
            msg = _fetch_message(service, message_id, full, deadline)
        except FetchError as e:
            logger.warning(f"Unable to retrieve message {message_id}: {e}")
            continue

        info = _build_message_info(msg, fields, user_email, label_index)
        if full:
            body = extract_body(msg.get('payload'))
            if body:
                info['body'] = body
        messages.append(info)

    logger.debug(f"Retrieved {len(messages)} of {len(message_ids)} messages")
    return messages


def get_message(
    service: Any,
    message_id: str,
    deadline: Optional[Deadline] = None,
) -> Dict[str, Any]:
    """
    Retrieve one message with every field populated and its body extracted.

    Returns:
        Dict with id, threadId, url, from, to, subject, date, labels, body

    Raises:
        FetchError: If the profile, label, or message call fails
    """
    user_email = get_user_email(service, deadline)
    label_index = fetch_label_index(service, deadline)

    logger.debug(f"Retrieving message with ID: {message_id}")
    msg = execute_request(
        service.users().messages().get(userId='me', id=message_id, format='full'),
        f"unable to retrieve message {message_id}",
        deadline,
    )

    headers = _header_values(msg)
    detail = {
        "id": msg.get('id', message_id),
        "threadId": msg.get('threadId', ''),
        "url": build_mail_url(user_email, msg.get('threadId', '')),
        "from": headers.get('from', ''),
        "to": headers.get('to', ''),
        "subject": headers.get('subject', ''),
        "date": headers.get('date', ''),
        "labels": map_label_ids_to_names(msg.get('labelIds'), label_index),
        "body": extract_body(msg.get('payload')),
    }

    logger.debug(f"Successfully retrieved message: '{detail['subject']}'")
    return detail


def _fetch_message(service: Any, message_id: str, full: bool, deadline: Optional[Deadline]) -> dict:
    if full:
        request = service.users().messages().get(userId='me', id=message_id, format='full')
    else:
        request = service.users().messages().get(
            userId='me', id=message_id, format='metadata', metadataHeaders=METADATA_HEADERS
        )
    return execute_request(request, f"unable to retrieve message {message_id}", deadline)


def _header_values(msg: dict) -> Dict[str, str]:
    """Collect the projected headers of a message; a later duplicate wins."""
    values = {}
    payload = msg.get('payload') or {}
    for header in payload.get('headers', []):
        key = HEADER_FIELDS.get(header.get('name', '').lower())
        if key:
            values[key] = header.get('value', '')
    return values


def _build_message_info(
    msg: dict,
    fields: Set[str],
    user_email: Optional[str],
    label_index: Optional[LabelIndex],
) -> Dict[str, Any]:
    """Project a message onto the requested fields, leaving out empty values."""
    info = {}

    if "id" in fields and msg.get('id'):
        info['id'] = msg['id']
    if "threadid" in fields and msg.get('threadId'):
        info['threadId'] = msg['threadId']
    if "url" in fields:
        info['url'] = build_mail_url(user_email or '', msg.get('threadId', ''))

    headers = _header_values(msg)
    for key in HEADER_FIELDS.values():
        if key in fields and headers.get(key):
            info[key] = headers[key]

    if "snippet" in fields and msg.get('snippet'):
        info['snippet'] = msg['snippet']
    if "labels" in fields and label_index is not None:
        names = label_index.map_label_ids_to_names(msg.get('labelIds', []))
        if names:
            info['labels'] = names

    return info
