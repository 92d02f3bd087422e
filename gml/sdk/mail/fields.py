"""Output field selection for message listings."""

from typing import Set

# Fields understood by the lister and formatter, in table column order
AVAILABLE_FIELDS = (
    "id", "threadid", "url", "from", "to", "subject", "date", "labels", "snippet", "body",
)

DEFAULT_FIELDS = "id,from,subject,date,labels,snippet"

# Headers requested for metadata-only fetches
METADATA_HEADERS = ["From", "To", "Subject", "Date"]


def parse_fields(field_list: str) -> Set[str]:
    """
    Parse a comma-separated field list into a set of lowercase names.

    Tokens are not validated; unknown names are kept and simply never match.
    An empty token (e.g. from a trailing comma) is kept as "".
    """
    return {token.strip().lower() for token in field_list.split(',')}


def needs_full_fetch(fields: Set[str]) -> bool:
    """Only the body requires fetching messages at full fidelity."""
    return "body" in fields
