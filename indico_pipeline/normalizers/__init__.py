"""Raw agenda -> canonical Meeting.

Both wire formats end up in the same model; ``normalize`` picks the right
path from the type of the raw object.
"""

from typing import Optional, Union

from indico_pipeline.models.agenda import Meeting
from indico_pipeline.models.raw import RawConference, RawJsonEvent
from indico_pipeline.normalizers.json_export import normalize_json
from indico_pipeline.normalizers.markup import normalize_markup
from indico_pipeline.normalizers.materials import MISSING_MATERIAL, MessageCallback, select_best

RawAgenda = Union[RawConference, RawJsonEvent]


def normalize(
    raw: RawAgenda,
    site: str,
    on_message: Optional[MessageCallback] = None,
) -> Meeting:
    """Normalize either raw shape."""
    if isinstance(raw, RawJsonEvent):
        return normalize_json(raw, site, on_message)
    return normalize_markup(raw, site, on_message)


__all__ = [
    "MISSING_MATERIAL",
    "MessageCallback",
    "RawAgenda",
    "normalize",
    "normalize_json",
    "normalize_markup",
    "select_best",
]
