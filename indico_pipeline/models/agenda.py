"""Canonical meeting model.

Whatever the agenda server sent (legacy XML or the JSON export), it ends up
as Meeting -> Session -> Talk. A plain meeting has a single session; material
hung off the meeting or a session shows up as EXTRA_MATERIAL talks.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TalkKind(str, Enum):
    """What a Talk entry stands for."""

    ORDINARY = "ordinary"
    EXTRA_MATERIAL = "extra_material"  # files attached outside any contribution


class TalkMaterial(BaseModel):
    """One uploaded file."""

    model_config = ConfigDict(frozen=True)

    url: str
    display_name: str = ""
    extension: str = ""  # with the leading dot: ".pdf"
    material_type: Optional[str] = None  # label of the entry/folder it came from


class Talk(BaseModel):
    """A contribution, sub-contribution or bundle of extra material."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    start: datetime
    end: datetime
    speakers: list[str] = Field(default_factory=list)
    sub_talks: Optional[list["Talk"]] = None
    kind: TalkKind = TalkKind.ORDINARY

    # ===== BEST MATERIAL =====
    best_material_url: Optional[str] = None
    best_material_display_name: str = ""
    best_material_extension: str = ""
    all_material: list[TalkMaterial] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"Talk ID={self.id} ({self.title}) - {self.best_material_url or 'no URL'}"


def same_talk(first: Optional[Talk], second: Optional[Talk]) -> bool:
    """Deduplication identity: same id and same best material URL.

    Everything else (title, times, speakers...) is ignored on purpose, so this
    is not structural equality.
    """
    if first is None or second is None:
        return first is None and second is None
    return first.id == second.id and first.best_material_url == second.best_material_url


class Session(BaseModel):
    """A named group of talks."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    start: datetime
    end: datetime
    talks: list[Talk] = Field(default_factory=list)
    session_material: list[Talk] = Field(default_factory=list)


class Meeting(BaseModel):
    """Top level normalized agenda."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    site: str
    start: datetime
    end: datetime
    sessions: list[Session] = Field(min_length=1)
    meeting_talks: list[Talk] = Field(default_factory=list)

    def all_talks(self) -> list[Talk]:
        """Ordinary talks of every session, in schedule order."""
        return [talk for session in self.sessions for talk in session.talks]
