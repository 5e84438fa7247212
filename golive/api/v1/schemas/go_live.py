from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from golive.schemas import ClassifiedError, GoLiveSettings, Platform, ValidationIssue


class SettingsEditIn(BaseModel):
    """Partial settings; only the fields sent are applied.

    A ``null`` value inside a destination blob removes that key.
    """

    platforms: list[Platform] | None = Field(default=None, description="Selected destinations")
    destination_settings: dict[Platform, dict[str, Any]] | None = Field(
        default=None,
        validation_alias=AliasChoices("destination_settings", "destinationSettings"),
        description="Per-platform settings blobs",
    )
    advanced_mode: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("advanced_mode", "advancedMode"),
    )
    common: dict[str, Any] | None = Field(default=None, description="Shared title/description")
    overlay_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("overlay_url", "overlayUrl"),
    )
    overlay_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("overlay_name", "overlayName"),
    )

    def as_edits(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class PlatformIn(BaseModel):
    platform: Platform | None = Field(
        default=None, description="Target platform; omitted means every failed platform"
    )


class ValidateSettingsIn(BaseModel):
    settings: GoLiveSettings


class ValidateSettingsOut(BaseModel):
    ok: bool
    issues: list[ValidationIssue]
    error: ClassifiedError | None = None
