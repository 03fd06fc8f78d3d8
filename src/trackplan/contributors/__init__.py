"""Contributors - Mapping of configured contributors to scheduler records."""

from trackplan.contributors.mapper import EXTERNAL_CONTRIBUTOR_ID_PREFIX, map_contributors
from trackplan.contributors.models import ContributorRecord

__all__ = [
    "EXTERNAL_CONTRIBUTOR_ID_PREFIX",
    "ContributorRecord",
    "map_contributors",
]
