"""Turn fetched text into raw wire models.

Markup (``iconf`` XML) is walked with ElementTree and poured into the
``Raw*`` pydantic models; the JSON export goes straight through
``model_validate``. Every parse failure comes out as MalformedResponse so the
negotiation layer can decide whether another dialect is worth a try.
"""

import json
import xml.etree.ElementTree as ET
from typing import Optional

from pydantic import ValidationError

from indico_pipeline.exceptions import MalformedResponse
from indico_pipeline.models.raw import (
    RawConference,
    RawContribution,
    RawJsonEvent,
    RawJsonExport,
    RawMaterial,
    RawMaterialFile,
    RawSession,
    RawSpeakerName,
)

XML_START = "<?xml"
ROOT_START = "<iconf"
XML_END = "</iconf>"


def clean_markup(text: str, url: Optional[str] = None) -> str:
    """Cut anything the server wrapped around the document.

    Some installs prepend warnings or append debug footers, so we keep only
    ``<?xml ... </iconf>``, or ``<iconf ... </iconf>`` when the server sends
    no declaration.
    """
    start = text.find(XML_START)
    if start < 0:
        start = text.find(ROOT_START)
    if start < 0:
        raise MalformedResponse("No <iconf> document found in agenda response", url)
    end = text.find(XML_END, start)
    if end < 0:
        raise MalformedResponse("No closing </iconf> found in agenda response", url)
    return text[start:end + len(XML_END)]


def _text(elem: ET.Element, tag: str) -> Optional[str]:
    child = elem.find(tag)
    if child is None:
        return None
    return child.text or ""


def _parse_material(elem: ET.Element) -> RawMaterial:
    files = [
        RawMaterialFile(
            name=_text(f, "name"),
            type=_text(f, "type"),
            url=_text(f, "url"),
        )
        for f in elem.findall("files/file")
    ]
    return RawMaterial(
        id=_text(elem, "ID"),
        title=_text(elem, "title"),
        link=_text(elem, "link"),
        pdf=_text(elem, "pdf"),
        ps=_text(elem, "ps"),
        ppt=_text(elem, "ppt"),
        pptx=_text(elem, "pptx"),
        files=files,
    )


def _parse_speakers(elem: ET.Element) -> list[RawSpeakerName]:
    speakers = []
    for name in elem.findall("speakers/user/name"):
        speakers.append(
            RawSpeakerName(
                first=name.get("first"),
                middle=name.get("middle"),
                last=name.get("last"),
            )
        )
    return speakers


def _parse_contribution(elem: ET.Element) -> RawContribution:
    return RawContribution(
        id=_text(elem, "ID"),
        title=_text(elem, "title"),
        start_date=_text(elem, "startDate"),
        end_date=_text(elem, "endDate"),
        material=[_parse_material(m) for m in elem.findall("material")],
        speakers=_parse_speakers(elem),
        subcontributions=[_parse_contribution(s) for s in elem.findall("subcontribution")],
    )


def _parse_session(elem: ET.Element) -> RawSession:
    return RawSession(
        id=_text(elem, "ID"),
        title=_text(elem, "title"),
        start_date=_text(elem, "startDate"),
        end_date=_text(elem, "endDate"),
        contributions=[_parse_contribution(c) for c in elem.findall("contribution")],
        material=[_parse_material(m) for m in elem.findall("material")],
    )


def _is_deprecated(root: ET.Element) -> bool:
    flag = _text(root, "_deprecated")
    if flag is None:
        flag = root.get("_deprecated")
    return (flag or "").strip() == "True"


def parse_markup(text: str, url: Optional[str] = None) -> RawConference:
    """Parse an ``iconf`` XML document.

    The deprecation flag is reported on the result, not raised: deciding what
    to do about it is the caller's business.

    Raises:
        MalformedResponse: no XML document, broken XML or wrong root element.
    """
    try:
        root = ET.fromstring(clean_markup(text, url))
    except ET.ParseError as e:
        raise MalformedResponse(f"Agenda XML is not well formed: {e}", url) from e

    if root.tag != "iconf":
        raise MalformedResponse(f"Unexpected root element <{root.tag}>", url)

    try:
        return RawConference(
            id=_text(root, "ID") or "",
            category=_text(root, "category"),
            title=_text(root, "title") or "",
            start_date=_text(root, "startDate"),
            end_date=_text(root, "endDate"),
            contributions=[_parse_contribution(c) for c in root.findall("contribution")],
            sessions=[_parse_session(s) for s in root.findall("session")],
            material=[_parse_material(m) for m in root.findall("material")],
            deprecated=_is_deprecated(root),
        )
    except ValidationError as e:
        raise MalformedResponse(f"Agenda XML has unexpected content: {e.error_count()} errors", url) from e


def parse_json_export(text: str, url: Optional[str] = None) -> RawJsonEvent:
    """Parse a JSON export and return its single event.

    Raises:
        MalformedResponse: invalid JSON, schema mismatch, or not exactly one result.
    """
    try:
        export = RawJsonExport.model_validate(json.loads(text))
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Agenda JSON is not valid: {e.msg}", url) from e
    except ValidationError as e:
        raise MalformedResponse(f"Agenda JSON has unexpected shape: {e.error_count()} errors", url) from e

    if len(export.results) != 1:
        raise MalformedResponse(
            f"Expected exactly one event in JSON export, got {len(export.results)}", url
        )
    return export.results[0]
