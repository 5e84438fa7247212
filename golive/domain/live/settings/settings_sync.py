"""Settings Synchronizer: merges edits into stored settings and validates them."""

from __future__ import annotations

import copy
from typing import Any

from pydantic import ValidationError

from golive.schemas import (
    GoLiveSettings,
    Platform,
    PlatformInfo,
    ValidationIssue,
    ValidationResult,
)
from golive.services.platforms import PlatformRegistry
from golive.utils.go_live_errors import InvalidSettingsError

# Top-level fields an edit may replace wholesale
_SCALAR_FIELDS = ("advanced_mode", "overlay_url", "overlay_name")


class SettingsSynchronizer:
    """Merge, resolve and validate GoLiveSettings snapshots.

    Every method returns a new snapshot; inputs are never mutated.
    """

    def __init__(self, registry: PlatformRegistry):
        self.registry = registry

    def merge(self, previous: GoLiveSettings, edits: GoLiveSettings | dict) -> GoLiveSettings:
        """Deep-merge ``edits`` into ``previous``.

        Only fields present in ``edits`` are applied. Destination blobs are
        merged key by key, a ``None`` value removes the key. Blobs of platforms
        that are no longer selected are dropped; an edit that brings a blob
        for a platform that is not selected is rejected as a whole.

        Raises:
            InvalidSettingsError: If the merged snapshot is not consistent
        """
        try:
            changes = _edit_fields(edits)
            platforms = [Platform(p) for p in changes.get("platforms", previous.platforms)]
            edited_destinations = changes.get("destination_settings") or {}

            unknown = set(edited_destinations) - set(platforms)
            if unknown:
                names = ", ".join(sorted(str(p) for p in unknown))
                raise ValueError(f"settings given for platforms that are not selected: {names}")

            destinations = {
                platform: copy.deepcopy(blob)
                for platform, blob in previous.destination_settings.items()
                if platform in platforms
            }
            for platform, blob in edited_destinations.items():
                destinations[platform] = _deep_merge(destinations.get(platform) or {}, blob or {})

            merged: dict[str, Any] = {
                "platforms": platforms,
                "destination_settings": destinations,
                "common": _deep_merge(previous.common.model_dump(), changes.get("common") or {}),
            }
            for field in _SCALAR_FIELDS:
                merged[field] = changes.get(field, getattr(previous, field))

            return GoLiveSettings.model_validate(merged)
        except (ValueError, ValidationError) as e:
            issue = ValidationIssue(field="settings", message=str(e))
            raise InvalidSettingsError(ValidationResult(issues=[issue])) from e

    def resolve(self, settings: GoLiveSettings) -> GoLiveSettings:
        """Apply the common profile to every destination when advanced mode is off."""
        if settings.advanced_mode:
            return settings

        common = settings.common.model_dump(exclude_none=True)
        if not common:
            return settings

        destinations = {
            platform: {**settings.settings_for(platform), **common} for platform in settings.platforms
        }
        return settings.model_copy(update={"destination_settings": destinations})

    def prefill(self, settings: GoLiveSettings, infos: dict[Platform, PlatformInfo]) -> GoLiveSettings:
        """Fill fields the user left empty with the remote values from prepopulate."""
        destinations = copy.deepcopy(settings.destination_settings)
        for platform, info in infos.items():
            if platform not in settings.platforms:
                continue
            blob = destinations.setdefault(platform, {})
            for key, value in info.as_settings().items():
                if blob.get(key) in (None, ""):
                    blob[key] = value
        return settings.model_copy(update={"destination_settings": destinations})

    def validate(self, settings: GoLiveSettings) -> ValidationResult:
        """Validate every selected destination and collect all issues."""
        issues: list[ValidationIssue] = []
        if not settings.platforms:
            issues.append(ValidationIssue(field="platforms", message="select at least one destination"))

        resolved = self.resolve(settings)
        for platform in resolved.platforms:
            if platform not in self.registry:
                issues.append(
                    ValidationIssue(platform=platform, field="platform", message="is not supported")
                )
                continue
            adapter = self.registry.get(platform)
            issues.extend(adapter.validate_settings(resolved.settings_for(platform)).issues)

        return ValidationResult(issues=issues)


def _edit_fields(edits: GoLiveSettings | dict) -> dict[str, Any]:
    """Fields explicitly present in an edit, keyed by field name."""
    if isinstance(edits, GoLiveSettings):
        present = edits.model_fields_set
        values = {name: getattr(edits, name) for name in present}
        if "common" in values:
            values["common"] = edits.common.model_dump(exclude_unset=True)
        return values

    aliases = {
        "destinationSettings": "destination_settings",
        "advancedMode": "advanced_mode",
        "overlayUrl": "overlay_url",
        "overlayName": "overlay_name",
    }
    values = {aliases.get(key, key): value for key, value in edits.items()}
    if "platforms" in values:
        values["platforms"] = list(dict.fromkeys(Platform(p) for p in values["platforms"]))
    if "destination_settings" in values:
        values["destination_settings"] = {
            Platform(p): blob for p, blob in (values["destination_settings"] or {}).items()
        }
    return values


def _deep_merge(base: dict, changes: dict) -> dict:
    result = copy.deepcopy(base)
    for key, value in changes.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result
