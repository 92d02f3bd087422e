"""Gmail operations for gml SDK.

Provides functions for listing and reading Gmail messages.

Example usage:
    from gml.sdk.config import load_config
    from gml.sdk import mail

    service = mail.get_gmail_service(load_config())

    # List unread inbox messages with a few fields
    fields = mail.parse_fields("id,from,subject")
    messages = mail.list_messages(service, fields, labels=["INBOX", "UNREAD"])

    # Read a specific message
    message = mail.get_message(service, "message_id_here")
"""

from .service import get_gmail_service
from .labels import LabelIndex, fetch_label_index, resolve_label_ids, map_label_ids_to_names
from .body import extract_body
from .fields import parse_fields, AVAILABLE_FIELDS, DEFAULT_FIELDS
from .messages import list_messages, get_message, get_user_email, build_mail_url

__all__ = [
    "get_gmail_service",
    "LabelIndex",
    "fetch_label_index",
    "resolve_label_ids",
    "map_label_ids_to_names",
    "extract_body",
    "parse_fields",
    "AVAILABLE_FIELDS",
    "DEFAULT_FIELDS",
    "list_messages",
    "get_message",
    "get_user_email",
    "build_mail_url",
]
