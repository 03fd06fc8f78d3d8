"""Contributor Mapper - Converts contributor entries into scheduler records."""

from __future__ import annotations

from collections.abc import Sequence

from trackplan.contributors.models import ContributorRecord
from trackplan.settings import ContributorEntry, ExternalContributor

# YouTrack entity IDs have the form "x-y" with both x and y integers, so an ID
# starting with a non-digit can never collide with a YouTrack user ID.
EXTERNAL_CONTRIBUTOR_ID_PREFIX = "trackplan/external/"

MINUTES_PER_HOUR = 60


def map_contributors(
    entries: Sequence[ContributorEntry],
) -> tuple[list[ContributorRecord], dict[str, str]]:
    """Map contributor entries to scheduler records.

    External contributors are numbered in order of appearance, starting at 0.
    The numbering is local to this call, so the same input always yields the
    same IDs.

    Args:
        entries: Contributor entries in the order configured by the user.

    Returns:
        The contributor records (one per entry, same order) and a mapping from
        synthetic external contributor ID to the contributor's name.
    """
    records: list[ContributorRecord] = []
    id_to_external_name: dict[str, str] = {}
    for entry in entries:
        if isinstance(entry, ExternalContributor):
            contributor_id = f"{EXTERNAL_CONTRIBUTOR_ID_PREFIX}{len(id_to_external_name)}"
            id_to_external_name[contributor_id] = entry.name
            num_members = entry.num_members
        else:
            contributor_id = entry.id
            num_members = 1
        records.append(
            ContributorRecord(
                id=contributor_id,
                minutes_per_week=MINUTES_PER_HOUR * entry.hours_per_week,
                num_members=num_members,
            )
        )
    return records, id_to_external_name
