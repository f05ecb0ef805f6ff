"""Field merge policies.

Each mergeable field of a canonical publication is governed by one
``FieldPolicy``. The table is data, so callers can override single
fields without touching the resolver.
"""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType

from pubmerge.models import EXTRA_FIELDS

__all__ = [
    "CORE_FIELDS",
    "DEFAULT_FIELD_POLICIES",
    "KEY_FIELDS",
    "MERGEABLE_FIELDS",
    "SLOT_FIELDS",
    "FieldPolicy",
    "resolve_policies",
]


class FieldPolicy(StrEnum):
    """How an incoming value combines with the canonical value.

    Values
    ------
    FIRST_WINS
        Keep the existing value; fill it only when empty.
    ALWAYS_OVERWRITE
        Take every non-empty incoming value.
    LONGER_WINS
        Take the incoming value when it is strictly longer.
    AUTHORITATIVE_OVERWRITE
        The authoritative source overwrites; others only fill gaps.
    """

    FIRST_WINS = "first_wins"
    ALWAYS_OVERWRITE = "always_overwrite"
    LONGER_WINS = "longer_wins"
    AUTHORITATIVE_OVERWRITE = "authoritative_overwrite"


# Per-source slots; every source owns its own entry
SLOT_FIELDS: tuple[str, ...] = ("citations", "source_urls", "source_ids")

CORE_FIELDS: tuple[str, ...] = ("title", "authors", "venue", "year", "month", "day", "doi")

# Fields the key index derives keys from; once set they never change
KEY_FIELDS: tuple[str, ...] = ("title", "doi")

MERGEABLE_FIELDS: tuple[str, ...] = CORE_FIELDS + EXTRA_FIELDS + SLOT_FIELDS

DEFAULT_FIELD_POLICIES: Mapping[str, FieldPolicy] = MappingProxyType(
    {
        "title": FieldPolicy.FIRST_WINS,
        "authors": FieldPolicy.AUTHORITATIVE_OVERWRITE,
        "venue": FieldPolicy.LONGER_WINS,
        "year": FieldPolicy.FIRST_WINS,
        "month": FieldPolicy.FIRST_WINS,
        "day": FieldPolicy.FIRST_WINS,
        "doi": FieldPolicy.FIRST_WINS,
        **{name: FieldPolicy.FIRST_WINS for name in EXTRA_FIELDS},
        **{name: FieldPolicy.ALWAYS_OVERWRITE for name in SLOT_FIELDS},
    }
)


def resolve_policies(
    overrides: Mapping[str, FieldPolicy | str] | None = None,
) -> dict[str, FieldPolicy]:
    """Build a policy table from the defaults plus overrides.

    Parameters
    ----------
    overrides : Mapping[str, FieldPolicy | str] | None, optional
        Field-to-policy overrides. Policies may be given by value.

    Returns
    -------
    dict[str, FieldPolicy]
        Complete policy table.

    Raises
    ------
    ValueError
        If an override names an unknown field or policy, tries to change
        a per-source slot, or lets a key field be overwritten.
    """
    policies = dict(DEFAULT_FIELD_POLICIES)
    if not overrides:
        return policies

    for name, policy in overrides.items():
        if name not in MERGEABLE_FIELDS:
            raise ValueError(f"Unknown merge field: {name!r}")
        try:
            resolved = FieldPolicy(policy)
        except ValueError:
            raise ValueError(f"Unknown merge policy for {name!r}: {policy!r}") from None
        if name in SLOT_FIELDS and resolved is not FieldPolicy.ALWAYS_OVERWRITE:
            raise ValueError(f"Per-source slot {name!r} is always overwritten")
        if name in KEY_FIELDS and resolved is not FieldPolicy.FIRST_WINS:
            raise ValueError(f"Key field {name!r} is always first_wins")
        policies[name] = resolved

    return policies
