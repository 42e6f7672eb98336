"""Raw wire models for the two agenda formats.

The legacy XML (``iconf``) and the JSON export are mirrored as loosely as
possible: unknown keys are dropped, missing lists are empty, ids are strings.
Nothing here is normalized; see ``indico_pipeline.normalizers``.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


def _as_str(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _session_name(value: Any) -> Any:
    # Some exports send the whole session object instead of its title
    if isinstance(value, dict):
        return value.get("title")
    return _as_str(value)


IdStr = Annotated[str, BeforeValidator(_as_str)]
OptIdStr = Annotated[Optional[str], BeforeValidator(_as_str)]


# =============================================================================
# LEGACY XML (iconf)
# =============================================================================

class RawMaterialFile(BaseModel):
    """<file> inside a <material><files> block."""

    name: Optional[str] = None
    type: Optional[str] = None  # "pdf", "pptx", ...
    url: Optional[str] = None


class RawMaterial(BaseModel):
    """<material>: a labelled bundle of uploaded files."""

    id: Optional[str] = None  # "slides", "0", ...
    title: Optional[str] = None  # "Slides", "Poster", ...
    link: Optional[str] = None

    # Some servers also put direct links next to the files (!?)
    pdf: Optional[str] = None
    ps: Optional[str] = None
    ppt: Optional[str] = None
    pptx: Optional[str] = None

    files: list[RawMaterialFile] = Field(default_factory=list)


class RawSpeakerName(BaseModel):
    """<user><name first=".." middle=".." last=".."/></user>"""

    first: Optional[str] = None
    middle: Optional[str] = None
    last: Optional[str] = None


class RawContribution(BaseModel):
    """<contribution> or <subcontribution>."""

    id: Optional[str] = None
    title: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    material: list[RawMaterial] = Field(default_factory=list)
    speakers: list[RawSpeakerName] = Field(default_factory=list)
    subcontributions: list["RawContribution"] = Field(default_factory=list)


class RawSession(BaseModel):
    """<session>."""

    id: Optional[str] = None
    title: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    contributions: list[RawContribution] = Field(default_factory=list)
    material: list[RawMaterial] = Field(default_factory=list)


class RawConference(BaseModel):
    """<iconf> root."""

    id: str = ""
    category: Optional[str] = None
    title: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    contributions: list[RawContribution] = Field(default_factory=list)
    sessions: list[RawSession] = Field(default_factory=list)
    material: list[RawMaterial] = Field(default_factory=list)
    deprecated: bool = False  # <_deprecated>True</_deprecated>


# =============================================================================
# JSON EXPORT (/export/event/<id>.json)
# =============================================================================

class RawJsonDate(BaseModel):
    """{"date": "2015-07-09", "time": "14:00:00", "tz": "Europe/Zurich"}"""

    date: Optional[str] = None
    time: Optional[str] = None
    tz: Optional[str] = None


class RawJsonPerson(BaseModel):
    fullName: Optional[str] = None
    affiliation: Optional[str] = None


class RawJsonAttachment(BaseModel):
    id: OptIdStr = None
    title: Optional[str] = None
    filename: Optional[str] = None
    download_url: Optional[str] = None
    link_url: Optional[str] = None
    content_type: Optional[str] = None
    type: Optional[str] = None  # "file" or "link"


class RawJsonFolder(BaseModel):
    id: OptIdStr = None
    title: Optional[str] = None
    default_folder: bool = False
    attachments: Annotated[list[RawJsonAttachment], BeforeValidator(_none_as_empty)] = Field(default_factory=list)


class RawJsonSubContribution(BaseModel):
    id: IdStr = ""
    title: Optional[str] = None
    speakers: Annotated[list[RawJsonPerson], BeforeValidator(_none_as_empty)] = Field(default_factory=list)
    folders: Annotated[list[RawJsonFolder], BeforeValidator(_none_as_empty)] = Field(default_factory=list)


class RawJsonContribution(BaseModel):
    id: IdStr = ""
    title: Optional[str] = None
    startDate: Optional[RawJsonDate] = None
    endDate: Optional[RawJsonDate] = None
    session: Annotated[Optional[str], BeforeValidator(_session_name)] = None
    speakers: Annotated[list[RawJsonPerson], BeforeValidator(_none_as_empty)] = Field(default_factory=list)
    folders: Annotated[list[RawJsonFolder], BeforeValidator(_none_as_empty)] = Field(default_factory=list)
    subContributions: Annotated[
        list[RawJsonSubContribution], BeforeValidator(_none_as_empty)
    ] = Field(default_factory=list)


class RawJsonSessionInfo(BaseModel):
    """The nested ``session`` block of a session slot (holds its folders)."""

    id: OptIdStr = None
    title: Optional[str] = None
    folders: Annotated[list[RawJsonFolder], BeforeValidator(_none_as_empty)] = Field(default_factory=list)


class RawJsonSession(BaseModel):
    id: IdStr = ""
    title: Optional[str] = None
    startDate: Optional[RawJsonDate] = None
    endDate: Optional[RawJsonDate] = None
    contributions: Annotated[
        list[RawJsonContribution], BeforeValidator(_none_as_empty)
    ] = Field(default_factory=list)
    session: Optional[RawJsonSessionInfo] = None


class RawJsonEvent(BaseModel):
    """One entry of ``results``."""

    id: IdStr
    title: str = ""
    startDate: Optional[RawJsonDate] = None
    endDate: Optional[RawJsonDate] = None
    timezone: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None
    contributions: Annotated[
        list[RawJsonContribution], BeforeValidator(_none_as_empty)
    ] = Field(default_factory=list)
    sessions: Annotated[list[RawJsonSession], BeforeValidator(_none_as_empty)] = Field(default_factory=list)
    folders: Annotated[list[RawJsonFolder], BeforeValidator(_none_as_empty)] = Field(default_factory=list)

    # the export carries a lot we don't use
    model_config = ConfigDict(extra="ignore")


class RawJsonExport(BaseModel):
    """Envelope returned by the export API."""

    count: int = 0
    url: Optional[str] = None
    ts: Optional[int] = None
    results: Annotated[list[RawJsonEvent], BeforeValidator(_none_as_empty)] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
