"""Data models for the agenda pipeline."""

from indico_pipeline.models.agenda import (
    Meeting,
    Session,
    Talk,
    TalkKind,
    TalkMaterial,
    same_talk,
)
from indico_pipeline.models.location import AgendaEvent, AgendaLocation

__all__ = [
    "Meeting",
    "Session",
    "Talk",
    "TalkKind",
    "TalkMaterial",
    "same_talk",
    "AgendaEvent",
    "AgendaLocation",
]
