"""Data models for planning settings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from trackplan.settings.exceptions import SettingsError


class ContributorKind(str, Enum):
    """Kind of contributor entry."""

    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass(frozen=True)
class InternalContributor:
    """A contributor backed by a YouTrack user account.

    Attributes:
        id: YouTrack user ID (always starts with a digit).
        hours_per_week: Hours per week this user works on the plan.
    """

    id: str
    hours_per_week: float


@dataclass(frozen=True)
class ExternalContributor:
    """A contributor not known to YouTrack, possibly a group of people.

    Attributes:
        name: Display name.
        num_members: Number of people in the group.
        hours_per_week: Hours per week per person.
    """

    name: str
    num_members: int
    hours_per_week: float


ContributorEntry = InternalContributor | ExternalContributor


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Immutable, normalized view of the settings at one point in time.

    Two snapshots are equal if all their fields are equal. Set-valued fields
    are stored as sorted tuples, so the order in which ids were entered does
    not matter. The order of contributors does matter.
    """

    base_url: str = ""
    service_id: str = ""
    state_field_id: str = ""
    inactive_state_ids: tuple[str, ...] = ()
    remaining_effort_field_id: str = ""
    remaining_wait_field_id: str = ""
    assignee_field_id: str = ""
    type_field_id: str = ""
    splittable_type_ids: tuple[str, ...] = ()
    depends_link_type_id: str = ""
    does_inward_depend_on_outward: bool = False
    saved_query_id: str = ""
    overlay_saved_query_id: str = ""
    contributors: tuple[ContributorEntry, ...] = ()

    def without_contributors(self) -> ConfigurationSnapshot:
        """Return a copy with an empty contributor list.

        Everything that remains is relevant to reconstructing the plan from
        YouTrack.
        """
        return replace(self, contributors=())


def _normalize_ids(ids: Iterable[str]) -> tuple[str, ...]:
    return tuple(sorted({value.strip() for value in ids if value.strip()}))


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if url and not url.endswith("/"):
        url += "/"
    return url


def contributor_from_dict(data: dict[str, Any]) -> ContributorEntry:
    """Create a contributor entry from a plain dictionary.

    Raises:
        SettingsError: If the type is unknown or a required key is missing.
    """
    kind = data.get("type", ContributorKind.INTERNAL.value)
    try:
        if kind == ContributorKind.INTERNAL.value:
            return InternalContributor(
                id=str(data["id"]),
                hours_per_week=float(data["hours_per_week"]),
            )
        if kind == ContributorKind.EXTERNAL.value:
            return ExternalContributor(
                name=str(data["name"]),
                num_members=int(data.get("num_members", 1)),
                hours_per_week=float(data["hours_per_week"]),
            )
    except KeyError as e:
        raise SettingsError(f"Contributor is missing required key {e}") from e
    raise SettingsError(f"Unknown contributor type: {kind!r}")


def contributor_to_dict(contributor: ContributorEntry) -> dict[str, Any]:
    """Convert a contributor entry to a plain dictionary."""
    if isinstance(contributor, ExternalContributor):
        return {
            "type": ContributorKind.EXTERNAL.value,
            "name": contributor.name,
            "num_members": contributor.num_members,
            "hours_per_week": contributor.hours_per_week,
        }
    return {
        "type": ContributorKind.INTERNAL.value,
        "id": contributor.id,
        "hours_per_week": contributor.hours_per_week,
    }


@dataclass
class Settings:
    """User-editable settings.

    Unlike ConfigurationSnapshot, settings are mutable and not normalized.
    Call snapshot() to capture the current values.
    """

    name: str = ""
    base_url: str = ""
    service_id: str = ""
    state_field_id: str = ""
    inactive_state_ids: list[str] = field(default_factory=list)
    remaining_effort_field_id: str = ""
    remaining_wait_field_id: str = ""
    assignee_field_id: str = ""
    type_field_id: str = ""
    splittable_type_ids: list[str] = field(default_factory=list)
    depends_link_type_id: str = ""
    does_inward_depend_on_outward: bool = False
    saved_query_id: str = ""
    overlay_saved_query_id: str = ""
    contributors: list[ContributorEntry] = field(default_factory=list)

    def snapshot(self) -> ConfigurationSnapshot:
        """Capture the current settings as a normalized snapshot.

        The display name is not part of the snapshot.
        """
        return ConfigurationSnapshot(
            base_url=_normalize_base_url(self.base_url),
            service_id=self.service_id.strip(),
            state_field_id=self.state_field_id.strip(),
            inactive_state_ids=_normalize_ids(self.inactive_state_ids),
            remaining_effort_field_id=self.remaining_effort_field_id.strip(),
            remaining_wait_field_id=self.remaining_wait_field_id.strip(),
            assignee_field_id=self.assignee_field_id.strip(),
            type_field_id=self.type_field_id.strip(),
            splittable_type_ids=_normalize_ids(self.splittable_type_ids),
            depends_link_type_id=self.depends_link_type_id.strip(),
            does_inward_depend_on_outward=self.does_inward_depend_on_outward,
            saved_query_id=self.saved_query_id.strip(),
            overlay_saved_query_id=self.overlay_saved_query_id.strip(),
            contributors=tuple(self.contributors),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a plain dictionary (YAML or JSON).

        Unknown keys are ignored; missing keys take their defaults.

        Raises:
            SettingsError: If a contributor entry is invalid.
        """
        if not isinstance(data, dict):
            raise SettingsError("Settings must be a mapping")
        contributors = data.get("contributors") or []
        return cls(
            name=str(data.get("name", "")),
            base_url=str(data.get("base_url", "")),
            service_id=str(data.get("service_id", "")),
            state_field_id=str(data.get("state_field_id", "")),
            inactive_state_ids=[str(v) for v in data.get("inactive_state_ids") or []],
            remaining_effort_field_id=str(data.get("remaining_effort_field_id", "")),
            remaining_wait_field_id=str(data.get("remaining_wait_field_id", "")),
            assignee_field_id=str(data.get("assignee_field_id", "")),
            type_field_id=str(data.get("type_field_id", "")),
            splittable_type_ids=[str(v) for v in data.get("splittable_type_ids") or []],
            depends_link_type_id=str(data.get("depends_link_type_id", "")),
            does_inward_depend_on_outward=bool(data.get("does_inward_depend_on_outward", False)),
            saved_query_id=str(data.get("saved_query_id", "")),
            overlay_saved_query_id=str(data.get("overlay_saved_query_id", "")),
            contributors=[contributor_from_dict(c) for c in contributors],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary."""
        return {
            "name": self.name,
            "base_url": self.base_url,
            "service_id": self.service_id,
            "state_field_id": self.state_field_id,
            "inactive_state_ids": list(self.inactive_state_ids),
            "remaining_effort_field_id": self.remaining_effort_field_id,
            "remaining_wait_field_id": self.remaining_wait_field_id,
            "assignee_field_id": self.assignee_field_id,
            "type_field_id": self.type_field_id,
            "splittable_type_ids": list(self.splittable_type_ids),
            "depends_link_type_id": self.depends_link_type_id,
            "does_inward_depend_on_outward": self.does_inward_depend_on_outward,
            "saved_query_id": self.saved_query_id,
            "overlay_saved_query_id": self.overlay_saved_query_id,
            "contributors": [contributor_to_dict(c) for c in self.contributors],
        }
