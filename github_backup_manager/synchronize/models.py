"""Data models shared by the listing, scheduling and committing stages."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class CandidateEntry(BaseModel):
    """A remote repository together with the time it was last modified.

    Accepts the field names emitted by `gh repo list --json nameWithOwner,updatedAt`.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    repository_id: str = Field(alias="nameWithOwner")
    remote_updated_at: AwareDatetime = Field(alias="updatedAt")


class SyncMethod(str, Enum):
    """Which sync operation produced an outcome."""

    PULL = "pull"
    CLONE = "clone"
    NONE = "none"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of attempting to sync a single candidate."""

    repository_id: str
    attempted_at: datetime
    succeeded: bool
    method: SyncMethod = SyncMethod.NONE
    error: str | None = None
