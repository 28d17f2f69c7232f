"""Catalog-related data models.

This module contains Pydantic models for update records, the grouped
catalog view, and download actions.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .common import BaseModel


class ReleaseType(str, Enum):
    """Release classification enumeration."""

    STABLE = "stable"
    BETA = "beta"
    ALPHA = "alpha"
    HOTFIX = "hotfix"
    FLASHBACK = "flashback"


class DownloadType(str, Enum):
    """Download mechanism enumeration."""

    STEAM_DEPOT = "steam_depot"
    DIRECT_LINK = "direct_link"
    GOOGLE_DRIVE = "google_drive"


class DownloadKind(str, Enum):
    """What a download action hands back to the caller."""

    SCRIPT = "script"
    LINK = "link"


class NotificationType(str, Enum):
    """Notification type enumeration."""

    SUCCESS = "success"
    INFO = "info"


class Update(BaseModel):
    """A historical game build.

    ``download_type`` decides which of ``manifest_id`` and ``download_url``
    is meaningful.
    """

    id: str = Field(..., description="Unique update identifier")
    name: str = Field(..., description="Display name")
    version: Optional[str] = Field(None, description="Version string")
    release_date: Optional[date] = Field(None, description="Release date")
    year: Optional[int] = Field(None, description="Release year used for grouping")
    release_type: ReleaseType = Field(default=ReleaseType.STABLE, description="Release classification")
    download_type: DownloadType = Field(..., description="Download mechanism")
    manifest_id: Optional[str] = Field(None, description="Steam depot manifest ID")
    download_url: Optional[str] = Field(None, description="External download URL")

    @property
    def label(self) -> str:
        """Name with the version appended when there is one."""
        return f"{self.name} v{self.version}" if self.version else self.name


class YearGroup(BaseModel):
    """Updates released in one year."""

    year: int = Field(..., description="Release year")
    count: int = Field(..., description="Number of updates in the group")
    expanded: bool = Field(default=False, description="Whether the group is expanded")
    updates: List[Update] = Field(default_factory=list, description="Updates in fixture order")


class CatalogView(BaseModel):
    """Grouped, filtered catalog."""

    query: str = Field(default="", description="Search query applied")
    total_versions: int = Field(..., description="Number of updates before filtering")
    year_count: int = Field(..., description="Number of year groups after filtering")
    groups: List[YearGroup] = Field(default_factory=list, description="Year groups, newest first")
    expanded_years: List[int] = Field(default_factory=list, description="Expanded years, newest first")
    empty_message: Optional[str] = Field(None, description="Message shown when nothing matches")


class Notification(BaseModel):
    """A transient notification to show after an action."""

    message: str = Field(..., description="Notification text")
    type: NotificationType = Field(default=NotificationType.INFO, description="Notification type")
    duration_ms: int = Field(default=4000, ge=0, description="Display duration in milliseconds")


class DownloadAction(BaseModel):
    """Result of requesting a download for an update."""

    kind: DownloadKind = Field(..., description="Script download or external link")
    update_id: str = Field(..., description="Update identifier")
    filename: Optional[str] = Field(None, description="Script filename")
    script_url: Optional[str] = Field(None, description="Where to fetch the generated script")
    url: Optional[str] = Field(None, description="External link to open")
    notification: Notification = Field(..., description="Notification to show")
