from datetime import datetime

from pydantic import BaseModel, Field

from golive.schemas import AuthMode, AuthPhase, ClassifiedError, Platform


class StartAuthIn(BaseModel):
    platform: Platform
    mode: AuthMode | None = Field(
        default=None, description="Defaults to the mode the platform requires"
    )
    merge: bool = Field(default=False, description="Link to the primary account")


class PlatformIn(BaseModel):
    platform: Platform


class AuthStateOut(BaseModel):
    platform: Platform
    phase: AuthPhase
    connected: bool
    auth_busy: bool
    merged: bool
    primary: bool
    scopes: list[str]
    missing_scopes: list[str]
    updated_at: datetime | None = None


class AuthStatesOut(BaseModel):
    primary_platform: Platform | None = None
    platforms: list[AuthStateOut]


class BeginMergeIn(BaseModel):
    platform: Platform
    overlay_url: str | None = None
    overlay_name: str | None = None


class MergeFlowOut(BaseModel):
    platform: Platform
    step: str
    page_url: str | None = Field(default=None, description="Page creation link to open")
    overlay_path: str | None = None
    error: ClassifiedError | None = None
