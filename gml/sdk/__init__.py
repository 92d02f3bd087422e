"""gml SDK - Core library for Gmail message access.

This SDK can be used by:
- The gml CLI
- Third-party applications

Example usage:
    from gml.sdk import config, mail

    service = mail.get_gmail_service(config.load_config())
    messages = mail.list_messages(service, mail.parse_fields("id,subject"), query="is:unread")
"""

from . import config
from . import auth
from . import mail

__all__ = ["config", "auth", "mail"]
