"""Legacy XML agenda -> Meeting."""

from typing import Optional

from indico_pipeline.models.agenda import Meeting, Session, Talk
from indico_pipeline.models.raw import RawConference, RawContribution, RawSession, RawSpeakerName
from indico_pipeline.normalizers.dates import parse_markup_date
from indico_pipeline.normalizers.materials import (
    MessageCallback,
    best_material_fields,
    markup_extra_material,
    markup_talk_materials,
)
from indico_pipeline.normalizers.sessions import sessionize_orphans
from indico_pipeline.signing.timecodec import EPOCH_ZERO

SINGLE_SESSION_ID = "0"


def speaker_name(name: RawSpeakerName) -> str:
    """Speaker as "First Middle Last" without doubled or trailing blanks."""
    rest = f"{name.middle or ''} {name.last or ''}".strip()
    return f"{name.first or ''} {rest}".strip()


def normalize_contribution(
    contrib: RawContribution,
    on_message: Optional[MessageCallback] = None,
) -> Talk:
    """One <contribution> (or <subcontribution>) as a Talk, recursively."""
    title = contrib.title or ""
    materials = markup_talk_materials(contrib.material)
    sub_talks = [normalize_contribution(sub, on_message) for sub in contrib.subcontributions]

    return Talk(
        id=contrib.id or "",
        title=title,
        start=parse_markup_date(contrib.start_date),
        end=parse_markup_date(contrib.end_date),
        speakers=[speaker_name(s) for s in contrib.speakers],
        sub_talks=sub_talks or None,
        all_material=materials,
        **best_material_fields(materials, title, on_message),
    )


def normalize_session(
    session: RawSession,
    on_message: Optional[MessageCallback] = None,
) -> Session:
    return Session(
        id=session.id or "",
        title=session.title or "",
        start=parse_markup_date(session.start_date),
        end=parse_markup_date(session.end_date),
        talks=[normalize_contribution(c, on_message) for c in session.contributions],
        session_material=markup_extra_material(session.material),
    )


def normalize_markup(
    raw: RawConference,
    site: str,
    on_message: Optional[MessageCallback] = None,
) -> Meeting:
    """Build the canonical Meeting from a parsed ``iconf`` document.

    A plain meeting (no <session>) becomes one session "0" that mirrors the
    header. With sessions, any top-level contributions are folded into
    ad-hoc sessions appended after the real ones.
    """
    title = raw.title.strip()
    start = parse_markup_date(raw.start_date)
    end = parse_markup_date(raw.end_date)
    talks = [normalize_contribution(c, on_message) for c in raw.contributions]

    if raw.sessions:
        sessions = [normalize_session(s, on_message) for s in raw.sessions]
        sessions += sessionize_orphans(sessions, talks, EPOCH_ZERO)
    else:
        sessions = [
            Session(
                id=SINGLE_SESSION_ID,
                title=title,
                start=start,
                end=end,
                talks=talks,
                session_material=markup_extra_material(raw.material),
            )
        ]

    return Meeting(
        id=raw.id,
        title=title,
        site=site,
        start=start,
        end=end,
        sessions=sessions,
        meeting_talks=markup_extra_material(raw.material),
    )
