"""Gmail label lookup and resolution."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import LabelIndexUnavailableError, LabelNotFoundError
from ..timing import Deadline
from .service import execute_request

logger = logging.getLogger(__name__)


class LabelIndex:
    """
    Case-insensitive lookup tables for a mailbox's labels.

    Built once from a single label listing and never modified afterwards.
    On a name collision the last label listed wins.
    """

    def __init__(self, labels: Iterable[Dict[str, Any]]):
        name_to_id = {}
        id_to_name = {}
        id_to_id = {}
        for label in labels:
            label_id = label['id']
            name = label.get('name', label_id)
            name_to_id[name.lower()] = label_id
            id_to_name[label_id.lower()] = name
            id_to_id[label_id.lower()] = label_id
        self._name_to_id = name_to_id
        self._id_to_name = id_to_name
        self._id_to_id = id_to_id

    def __len__(self):
        return len(self._id_to_id)

    def resolve_label_ids(self, requested: Iterable[str]) -> List[str]:
        """
        Convert label names or IDs to canonical label IDs.

        Names are tried before IDs. Input order and duplicates are kept.

        Raises:
            LabelNotFoundError: On the first token that matches nothing
        """
        resolved = []
        for raw in requested:
            label = raw.strip().lower()
            if label in self._name_to_id:
                resolved.append(self._name_to_id[label])
            elif label in self._id_to_id:
                resolved.append(self._id_to_id[label])
            else:
                raise LabelNotFoundError(raw)
        return resolved

    def map_label_ids_to_names(self, ids: Iterable[str]) -> List[str]:
        """Convert label IDs to display names; unknown IDs are returned unchanged."""
        return [self._id_to_name.get(label_id.lower(), label_id) for label_id in ids]


def fetch_label_index(service: Any, deadline: Optional[Deadline] = None) -> LabelIndex:
    """
    List all labels in the mailbox and index them.

    Raises:
        FetchError: If the label listing fails
    """
    results = execute_request(
        service.users().labels().list(userId='me'),
        "unable to list labels",
        deadline,
    )
    index = LabelIndex(results.get('labels', []))
    logger.debug(f"Indexed {len(index)} labels")
    return index


def resolve_label_ids(index: Optional[LabelIndex], requested: Iterable[str]) -> List[str]:
    """Resolve label names or IDs against an index, which must be present."""
    if index is None:
        raise LabelIndexUnavailableError("label index is not available")
    return index.resolve_label_ids(requested)


def map_label_ids_to_names(ids: Optional[Iterable[str]], index: Optional[LabelIndex]) -> List[str]:
    """Map label IDs to names, falling back to the IDs when there is no index."""
    ids = list(ids or [])
    if index is None:
        return ids
    return index.map_label_ids_to_names(ids)
