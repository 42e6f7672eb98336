"""Putting talks that have no session into sessions.

Two strategies, one per wire format:

- Markup: top-level talks next to real sessions are attached to the closest
  session starting after them (a coffee-break talk belongs with what follows).
  Whatever is left after the last session becomes one trailing ad-hoc session.
- JSON: talks carry a session name; equal names make one session.
"""

from datetime import datetime
from typing import Optional

from indico_pipeline.models.agenda import Session, Talk

AD_HOC_SESSION_ID = "-1"
AD_HOC_SESSION_TITLE = "<ad-hoc session>"
GROUPED_SESSION_ID = "0"


def by_start(talks: list[Talk]) -> list[Talk]:
    """Talks in schedule order, stable for equal start times."""
    return sorted(talks, key=lambda t: t.start)


def session_from_talks(
    session_id: str,
    title: str,
    talks: list[Talk],
    empty_time: datetime,
) -> Session:
    """Session whose time span is computed from its talks."""
    ordered = by_start(talks)
    if ordered:
        start = min(t.start for t in ordered)
        end = max(t.end for t in ordered)
    else:
        start = end = empty_time
    return Session(id=session_id, title=title, start=start, end=end, talks=ordered)


def _ad_hoc(talks: list[Talk], empty_time: datetime) -> Session:
    return session_from_talks(AD_HOC_SESSION_ID, AD_HOC_SESSION_TITLE, talks, empty_time)


def _closest_following(talk: Talk, sessions: list[Session]) -> Optional[int]:
    later = [
        (session.start - talk.start, index)
        for index, session in enumerate(sessions)
        if session.start > talk.start
    ]
    if not later:
        return None
    # Smallest gap wins, ties go to the session listed first
    return min(later)[1]


def sessionize_orphans(
    sessions: list[Session],
    talks: list[Talk],
    empty_time: datetime,
) -> list[Session]:
    """Ad-hoc sessions for ``talks``, split around the defined ``sessions``.

    Returns only the new sessions; the defined ones are left untouched.
    """
    if not talks:
        return []
    if not sessions:
        return [_ad_hoc(talks, empty_time)]

    groups: dict[int, list[Talk]] = {}
    leftovers: list[Talk] = []
    for talk in talks:
        target = _closest_following(talk, sessions)
        if target is None:
            leftovers.append(talk)
        else:
            groups.setdefault(target, []).append(talk)

    result = [_ad_hoc(group, empty_time) for group in groups.values()]
    if leftovers:
        result.append(_ad_hoc(leftovers, empty_time))
    return result


def group_by_session_name(
    named_talks: list[tuple[Optional[str], Talk]],
    empty_time: datetime,
) -> list[Session]:
    """One session per distinct name, in first-seen order. None groups with ""."""
    groups: dict[str, list[Talk]] = {}
    for name, talk in named_talks:
        groups.setdefault(name or "", []).append(talk)
    return [
        session_from_talks(GROUPED_SESSION_ID, name, talks, empty_time)
        for name, talks in groups.items()
    ]
