"""Parse agenda URLs into AgendaLocation and build request URLs back out.

Indico sites have been serving the same conference under many URL shapes
over the years:

    http://indico.cern.ch/conferenceDisplay.py?confId=14475
    http://indico.cern.ch/conferenceOtherViews.py?view=standard&confId=14475
    http://indico.cern.ch/conferenceTimeTable.py?confId=14475#20100622
    http://indico.cern.ch/event/14475/
    http://indico.cern.ch/event/14475/timetable/

and categories under three more. All of them reduce to (site, subdir, id).
"""

import re
from datetime import datetime
from typing import Optional

from indico_pipeline.exceptions import InvalidParameter, LocatorError
from indico_pipeline.models.location import AgendaLocation
from indico_pipeline.signing.signer import sign_request

# Order matters: first match wins
CONFERENCE_PATTERNS = [
    # Legacy .py endpoints with a confId query parameter
    re.compile(r"(?P<protocol>https?)://(?P<site>[^/]+)/(?P<subdir>.+/)?.*(?i:confId)=(?P<conf>\w+)"),
    # Modern /event/<id> paths
    re.compile(r"(?P<protocol>https?)://(?P<site>[^/]+)/(?P<subdir>.+/)?event/(?P<conf>\w+)"),
]

CATEGORY_PATTERNS = [
    re.compile(r"(?P<protocol>https?)://(?P<site>[^/]+)/(?P<subdir>.+/)?export/categ/(?P<cat>.+)\.ics.*"),
    re.compile(r"(?P<protocol>https?)://(?P<site>[^/]+)/(?P<subdir>.+/)?category/(?P<cat>[^/]+)/*"),
    re.compile(r"(?P<protocol>https?)://(?P<site>[^/]+)/(?P<subdir>.+/)?.*categId=(?P<cat>[^&/]+).*"),
]

# Parameters the XML "other view" needs to dump the full timetable
MARKUP_VIEW_PARAMS = {
    "view": "xml",
    "showDate": "all",
    "showSession": "all",
    "detailLevel": "contribution",
    "fr": "no",
}

JSON_EXPORT_PARAMS = {
    "nc": "yes",
    "detail": "sessions",
}


def _first_match(patterns: list[re.Pattern], url: str) -> Optional[re.Match]:
    for pattern in patterns:
        match = pattern.search(url)
        if match:
            return match
    return None


def _subdirectory(match: re.Match) -> str:
    subdir = match.group("subdir")
    return subdir.rstrip("/") if subdir else ""


def parse_conference(url: str) -> AgendaLocation:
    """Turn any known conference URL into an AgendaLocation.

    Raises:
        LocatorError: URL has no confId parameter and no /event/ path, or
            doesn't start with http(s).
    """
    match = _first_match(CONFERENCE_PATTERNS, url)
    if match is None:
        raise LocatorError(
            f"Unable to interpret '{url.strip()}' as an Indico conference URL"
        )
    return AgendaLocation(
        site=match.group("site"),
        subdirectory=_subdirectory(match),
        identifier=match.group("conf"),
    )


def parse_category(url: str) -> AgendaLocation:
    """Turn a category URL (ics export, /category/ page, categId=) into a location."""
    match = _first_match(CATEGORY_PATTERNS, url)
    if match is None:
        raise LocatorError(f"Unable to interpret '{url.strip()}' as an Indico category URL")
    return AgendaLocation(
        site=match.group("site"),
        subdirectory=_subdirectory(match),
        identifier=match.group("cat"),
    )


def is_valid_category(url: str) -> bool:
    """True if the URL looks like a category. Doesn't check that it exists remotely."""
    return _first_match(CATEGORY_PATTERNS, url) is not None


def _prefix(location: AgendaLocation, https: bool) -> str:
    return location.base_url(https=https) + "/"


def build_conference_url(location: AgendaLocation, use_modern_format: bool) -> str:
    """Human-facing link to the conference page (not the data URL)."""
    if use_modern_format:
        return f"{_prefix(location, https=True)}event/{location.identifier}"
    return f"{_prefix(location, https=False)}conferenceDisplay.py?confId={location.identifier}"


def build_markup_url(
    location: AgendaLocation,
    use_modern_format: bool,
    api_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    use_timestamp: bool = True,
    when: Optional[datetime] = None,
) -> str:
    """URL of the full XML timetable, legacy or /event/ style."""
    params = dict(MARKUP_VIEW_PARAMS)
    if use_modern_format:
        path = f"/event/{location.identifier}/other-view"
    else:
        path = "/conferenceOtherViews.py"
        params["confId"] = location.identifier

    stem = sign_request(path, params, api_key, secret_key, use_timestamp=use_timestamp, when=when)
    # Legacy installs were plain http; the /event/ generation is https only
    return location.base_url(https=use_modern_format) + stem


def build_json_url(
    location: AgendaLocation,
    api_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    use_timestamp: bool = True,
    when: Optional[datetime] = None,
) -> str:
    """URL of the JSON export for a conference (modern Indico only)."""
    path = f"/export/event/{location.identifier}.json"
    stem = sign_request(path, JSON_EXPORT_PARAMS, api_key, secret_key, use_timestamp=use_timestamp, when=when)
    return location.base_url(https=True) + stem


def build_category_url(
    location: AgendaLocation,
    days_back: int,
    api_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    use_timestamp: bool = True,
    when: Optional[datetime] = None,
) -> str:
    """URL of the iCal feed for a category, going ``days_back`` days into the past.

    Raises:
        InvalidParameter: days_back is negative.
    """
    if days_back < 0:
        raise InvalidParameter(f"days_back must be zero or positive, got {days_back}")

    params = {}
    if days_back > 0:
        params["from"] = f"-{days_back}d"

    stem = sign_request(
        f"/export/categ/{location.identifier}.ics",
        params,
        api_key,
        secret_key,
        use_timestamp=use_timestamp,
        when=when,
    )
    return location.base_url(https=True) + stem
