"""Merge of source records into canonical publications."""

from pubmerge.merge.policy import (
    DEFAULT_FIELD_POLICIES,
    KEY_FIELDS,
    MERGEABLE_FIELDS,
    SLOT_FIELDS,
    FieldPolicy,
    resolve_policies,
)
from pubmerge.merge.resolver import merge_into, new_publication

__all__ = [
    "DEFAULT_FIELD_POLICIES",
    "KEY_FIELDS",
    "MERGEABLE_FIELDS",
    "SLOT_FIELDS",
    "FieldPolicy",
    "merge_into",
    "new_publication",
    "resolve_policies",
]
