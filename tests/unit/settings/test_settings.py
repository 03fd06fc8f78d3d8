"""Unit tests for settings and snapshots."""

from dataclasses import FrozenInstanceError, replace
from pathlib import Path
from textwrap import dedent

import pytest

from trackplan.settings import (
    ConfigurationSnapshot,
    ExternalContributor,
    InternalContributor,
    Settings,
    SettingsError,
    load_settings,
)


@pytest.mark.unit
class TestSnapshot:
    """Tests for Settings.snapshot."""

    def test_snapshot_is_immutable(self, settings: Settings) -> None:
        """Snapshots cannot be modified."""
        snapshot = settings.snapshot()

        with pytest.raises(FrozenInstanceError):
            snapshot.saved_query_id = "other"  # type: ignore[misc]

    def test_snapshots_compare_structurally(self, settings: Settings) -> None:
        """Two snapshots of the same settings are equal but not identical."""
        first = settings.snapshot()
        second = settings.snapshot()

        assert first == second
        assert first is not second

    def test_snapshot_is_detached_from_settings(self, settings: Settings) -> None:
        """Later changes to the settings do not affect a snapshot."""
        snapshot = settings.snapshot()

        settings.contributors.append(InternalContributor(id="1-9", hours_per_week=5))
        settings.saved_query_id = "108-2"

        assert len(snapshot.contributors) == 2
        assert snapshot.saved_query_id == "108-1"

    def test_id_sets_are_normalized(self, settings: Settings) -> None:
        """Order and duplicates of id sets do not matter."""
        other = replace(settings, inactive_state_ids=["95-0", "95-1", "95-0", " "])

        assert settings.snapshot().inactive_state_ids == ("95-0", "95-1")
        assert other.snapshot() == settings.snapshot()

    def test_base_url_gets_trailing_slash(self) -> None:
        """Base URL is normalized to end with a slash."""
        snapshot = Settings(base_url=" https://yt.example.com ").snapshot()

        assert snapshot.base_url == "https://yt.example.com/"

    def test_name_is_not_part_of_snapshot(self, settings: Settings) -> None:
        """Renaming the plan does not change the snapshot."""
        renamed = replace(settings, name="Other name")

        assert renamed.snapshot() == settings.snapshot()

    def test_contributor_order_matters(self, settings: Settings) -> None:
        """Reordering contributors changes the snapshot."""
        reordered = replace(settings, contributors=list(reversed(settings.contributors)))

        assert reordered.snapshot() != settings.snapshot()

    def test_without_contributors(self, settings: Settings) -> None:
        """without_contributors keeps everything but the contributors."""
        snapshot = settings.snapshot()
        stripped = snapshot.without_contributors()

        assert stripped.contributors == ()
        assert stripped.saved_query_id == snapshot.saved_query_id
        assert stripped == replace(settings, contributors=[]).snapshot()


@pytest.mark.unit
class TestFromDict:
    """Tests for Settings.from_dict and to_dict."""

    def test_from_dict_parses_contributors(self) -> None:
        """Internal and external contributors are parsed by type."""
        settings = Settings.from_dict(
            {
                "saved_query_id": "108-1",
                "contributors": [
                    {"type": "internal", "id": "1-1", "hours_per_week": 40},
                    {"type": "external", "name": "Agency", "num_members": 2, "hours_per_week": 8},
                ],
            }
        )

        assert settings.contributors == [
            InternalContributor(id="1-1", hours_per_week=40.0),
            ExternalContributor(name="Agency", num_members=2, hours_per_week=8.0),
        ]

    def test_from_dict_defaults_missing_keys(self) -> None:
        """Missing keys take their defaults."""
        settings = Settings.from_dict({})

        assert settings.snapshot() == ConfigurationSnapshot()

    def test_from_dict_unknown_contributor_type(self) -> None:
        """Unknown contributor types are rejected."""
        with pytest.raises(SettingsError, match="Unknown contributor type"):
            Settings.from_dict({"contributors": [{"type": "robot", "hours_per_week": 1}]})

    def test_from_dict_missing_contributor_key(self) -> None:
        """Contributors without required keys are rejected."""
        with pytest.raises(SettingsError, match="missing required key"):
            Settings.from_dict({"contributors": [{"type": "external", "hours_per_week": 1}]})

    def test_from_dict_rejects_non_mapping(self) -> None:
        """Settings must be a mapping."""
        with pytest.raises(SettingsError):
            Settings.from_dict(["not", "a", "mapping"])  # type: ignore[arg-type]

    def test_to_dict_round_trip(self, settings: Settings) -> None:
        """to_dict output can be read back by from_dict."""
        assert Settings.from_dict(settings.to_dict()) == settings


@pytest.mark.unit
class TestLoadSettings:
    """Tests for load_settings."""

    def test_load_valid_settings(self, tmp_path: Path) -> None:
        """Settings are read from YAML."""
        path = tmp_path / "plan.yaml"
        path.write_text(
            dedent("""
                name: Roadmap
                base_url: https://yt.example.com
                saved_query_id: "108-1"
                splittable_type_ids: ["96-1"]
                contributors:
                  - type: internal
                    id: "1-1"
                    hours_per_week: 32
                  - type: external
                    name: Contractors
                    num_members: 3
                    hours_per_week: 20
            """).strip()
        )

        settings = load_settings(path)

        assert settings.name == "Roadmap"
        assert settings.snapshot().base_url == "https://yt.example.com/"
        assert settings.splittable_type_ids == ["96-1"]
        assert len(settings.contributors) == 2

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Missing files raise SettingsError."""
        with pytest.raises(SettingsError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML raises SettingsError."""
        path = tmp_path / "plan.yaml"
        path.write_text("contributors: [unclosed")

        with pytest.raises(SettingsError, match="Invalid YAML"):
            load_settings(path)

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """An empty file yields default settings."""
        path = tmp_path / "plan.yaml"
        path.write_text("")

        assert load_settings(path) == Settings()
