from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Language = Literal["en", "ar"]
Theme = Literal["light", "dark"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationSettings(BaseModel):
    prayerReminders: bool = True
    adhanSound: bool = True


class ProfilePreferences(BaseModel):
    model_config = ConfigDict(extra="allow")

    notificationsEnabled: Optional[bool] = None
    soundEnabled: Optional[bool] = None
    notificationTiming: Optional[int] = None
    calculationMethod: Optional[str] = None
    madhab: Optional[str] = None
    timeFormat: Optional[str] = None
    showSeconds: Optional[bool] = None


class Location(BaseModel):
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    uid: str
    email: str = ""
    displayName: str = ""
    photoURL: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    language: Language = "en"
    theme: Theme = "light"
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    preferences: Optional[ProfilePreferences] = None
    createdAt: datetime = Field(default_factory=_now)
    updatedAt: datetime = Field(default_factory=_now)


class ProfileUpdate(BaseModel):
    """Partial profile write. Only the fields that were sent are applied."""

    model_config = ConfigDict(extra="forbid")

    displayName: Optional[str] = Field(None, max_length=255)
    photoURL: Optional[str] = None
    city: Optional[str] = Field(None, max_length=255)
    country: Optional[str] = Field(None, max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    language: Optional[Language] = None
    theme: Optional[Theme] = None
    notifications: Optional[NotificationSettings] = None
    preferences: Optional[ProfilePreferences] = None

    # Omit a field to leave it unchanged; these columns have no null state
    @field_validator("displayName", "language", "theme", "notifications")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class AuthenticatedUser(BaseModel):
    """Identity claims carried by the bearer token."""

    uid: str
    email: str = ""
    displayName: str = ""
    photoURL: Optional[str] = None
