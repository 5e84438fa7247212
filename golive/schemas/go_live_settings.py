"""User intent for a single go-live attempt."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .platform import Platform


class CommonSettings(BaseModel):
    """Fields shared by every destination when advanced mode is off."""

    title: str | None = None
    description: str | None = None


class GoLiveSettings(BaseModel):
    """Selected destinations and their settings blobs.

    Destination blobs are opaque to the orchestrator beyond adapter schema
    validation. ``destination_settings`` keys must be a subset of ``platforms``.
    """

    platforms: list[Platform] = Field(default_factory=list)
    destination_settings: dict[Platform, dict] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("destination_settings", "destinationSettings"),
    )
    advanced_mode: bool = Field(
        default=False,
        validation_alias=AliasChoices("advanced_mode", "advancedMode"),
    )
    common: CommonSettings = Field(default_factory=CommonSettings)

    # Only set when the session comes from the merge-platform onboarding flow
    overlay_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("overlay_url", "overlayUrl"),
    )
    overlay_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("overlay_name", "overlayName"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("platforms")
    @classmethod
    def _unique_platforms(cls, value: list[Platform]) -> list[Platform]:
        # Keep the first occurrence so the UI order is preserved
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def _destinations_subset_of_platforms(self) -> "GoLiveSettings":
        unknown = set(self.destination_settings) - set(self.platforms)
        if unknown:
            names = ", ".join(sorted(str(p) for p in unknown))
            raise ValueError(f"destination_settings has platforms that are not selected: {names}")
        return self

    @property
    def is_multiplatform(self) -> bool:
        return len(self.platforms) > 1

    def settings_for(self, platform: Platform) -> dict:
        """Copy of the blob for one platform (empty when not provided)."""
        return dict(self.destination_settings.get(platform) or {})


class ValidationIssue(BaseModel):
    """One field-level validation problem."""

    platform: Platform | None = None
    field: str
    message: str

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """Aggregated outcome of validating a settings snapshot."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return not self.issues

    def for_platform(self, platform: Platform) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.platform == platform]

    def summary(self) -> str:
        return "; ".join(
            f"{issue.platform or 'common'}.{issue.field}: {issue.message}" for issue in self.issues
        )
