"""Identity index derived from couch visit records.

This module maps person ids to display identities across host and
surfer visits. Missing or oddly shaped fields never raise.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from core.constants import HOST_VISITS_PATH, PERSON_KEYS, SURFER_VISITS_PATH
from core.types import Document, Identity, IdentityIndex


def build_identity_index(document: Document) -> IdentityIndex:
    """Build a person id to identity mapping from a profile document.

    Host visits are walked first, then surfer visits. A later record with
    the same person id replaces the earlier one, including records without
    an id, which all share the ``None`` key.

    Args:
        document: Parsed profile document.

    Returns:
        Identity index keyed by person id.
    """
    index: IdentityIndex = {}
    for visit_path in (HOST_VISITS_PATH, SURFER_VISITS_PATH):
        for visit in _iter_visits(document, visit_path):
            identity = identity_from_visit(visit)
            index[identity.person_id] = identity
    return index


def identity_from_visit(visit: Any) -> Identity:
    """Extract the identity of the other person of one visit record."""
    person = _person_of(visit)
    profile = _mapping_or_empty(person.get("profile"))
    return Identity(
        person_id=profile.get("id"),
        display_name=profile.get("display_name"),
        username=person.get("username"),
    )


def _person_of(visit: Any) -> Mapping[str, Any]:
    """Return the person object under the first truthy nesting key."""
    record = _mapping_or_empty(visit)
    for key in PERSON_KEYS:
        person = record.get(key)
        if person:
            return _mapping_or_empty(person)
    return {}


def _iter_visits(document: Document, path: tuple[str, ...]) -> Iterator[Any]:
    """Yield visit records found under a nested key path."""
    node: Any = document
    for key in path:
        node = _mapping_or_empty(node).get(key)
    if isinstance(node, list):
        yield from node


def _mapping_or_empty(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}
