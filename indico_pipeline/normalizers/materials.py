"""Uploaded material: flattening, best-file selection and extra-material talks.

A talk often carries the same slides several times (pdf + pptx, or a
"Slides" entry next to a "Poster" one). We keep all of it in
``all_material`` and expose one "best" file:

1. Entries are ranked by label: slides, transparencies, poster, "0", rest
2. Within the best label, files are ranked by type: pptx > ppt > pdf > ps > unknown
3. Ties keep source order
"""

from pathlib import PurePosixPath
from typing import Callable, Optional
from urllib.parse import urlparse

from indico_pipeline.models.agenda import Talk, TalkKind, TalkMaterial
from indico_pipeline.models.raw import RawJsonFolder, RawMaterial, RawMaterialFile
from indico_pipeline.signing.timecodec import EPOCH_ZERO, EPOCH_ZERO_UTC

# Most interesting first. Anything not listed ranks after all of these.
LABEL_PRECEDENCE = ("slides", "transparencies", "poster", "0")

# Least interesting first. Anything not listed ranks below "ps".
FILE_TYPE_PRECEDENCE = ("ps", "pdf", "ppt", "pptx")

# Direct links some servers put straight on a <material> entry
DIRECT_LINK_TYPES = ("pdf", "ps", "ppt", "pptx")

MISSING_MATERIAL = "MissingMaterial"

# (category, text) -> None
MessageCallback = Callable[[str, str], None]


def sanitize(value: Optional[str]) -> str:
    """Fix the odd Windows path separators and stray newlines Indico sends."""
    if not value:
        return ""
    return value.replace("\\", "/").replace("\n", "")


def label_rank(material_type: Optional[str]) -> int:
    """Lower is better. A missing label counts as slides."""
    label = material_type.lower() if material_type is not None else "slides"
    try:
        return LABEL_PRECEDENCE.index(label)
    except ValueError:
        return len(LABEL_PRECEDENCE)


def file_type_rank(file_type: Optional[str]) -> int:
    """Higher is better; -1 for types we don't know about."""
    kind = (file_type or "").lower()
    if kind.startswith("."):
        kind = kind[1:]
    try:
        return FILE_TYPE_PRECEDENCE.index(kind)
    except ValueError:
        return -1


def select_best(materials: list[TalkMaterial]) -> Optional[TalkMaterial]:
    """Pick the file a viewer most likely wants, None if there is nothing."""
    if not materials:
        return None
    best_label = min(label_rank(m.material_type) for m in materials)
    candidates = [m for m in materials if label_rank(m.material_type) == best_label]
    # max() returns the first of equal elements
    return max(candidates, key=lambda m: file_type_rank(m.extension))


def best_material_fields(
    materials: list[TalkMaterial],
    title: str,
    on_message: Optional[MessageCallback] = None,
) -> dict:
    """Talk keyword arguments for the best file; empty (and reported) if none."""
    best = select_best(materials)
    if best is None:
        if on_message is not None:
            on_message(MISSING_MATERIAL, f"No usable talk slides or poster found for {title}")
        return {}
    return {
        "best_material_url": best.url,
        "best_material_display_name": best.display_name,
        "best_material_extension": best.extension,
    }


def _split_name(name: str) -> tuple[str, str]:
    path = PurePosixPath(name)
    return path.stem, path.suffix


def _url_suffix(url: str) -> str:
    return PurePosixPath(urlparse(url).path).suffix


# =============================================================================
# LEGACY XML
# =============================================================================

def _file_material(f: RawMaterialFile, label: Optional[str]) -> Optional[TalkMaterial]:
    url = sanitize(f.url)
    if not url:
        return None
    stem, suffix = _split_name(sanitize(f.name))
    if not suffix and f.type:
        suffix = "." + f.type.lstrip(".")
    return TalkMaterial(
        url=url,
        display_name=stem,
        extension=suffix,
        material_type=label,
    )


def entry_label(entry: RawMaterial) -> Optional[str]:
    """Id or title, whichever ranks better (an id of "slides" beats a free-text title)."""
    candidates = [value for value in (entry.title, entry.id) if value]
    if not candidates:
        return None
    # min() keeps the title on ties
    return min(candidates, key=label_rank)


def markup_talk_materials(entries: list[RawMaterial]) -> list[TalkMaterial]:
    """Every file of every material entry, tagged with the entry's label."""
    result = []
    for entry in entries:
        label = entry_label(entry)
        if entry.files:
            for f in entry.files:
                material = _file_material(f, label)
                if material is not None:
                    result.append(material)
            continue

        # No files: fall back on the direct links, if any
        for kind in DIRECT_LINK_TYPES:
            url = sanitize(getattr(entry, kind))
            if url:
                result.append(
                    TalkMaterial(
                        url=url,
                        display_name=PurePosixPath(urlparse(url).path).stem,
                        extension=f".{kind}",
                        material_type=label,
                    )
                )
    return result


def _file_kind(f: RawMaterialFile) -> str:
    return f.type or _split_name(sanitize(f.name))[1]


def unique_files(entry: RawMaterial) -> list[RawMaterialFile]:
    """One file per stem (foo.pdf + foo.pptx -> foo.pptx), known types with a URL only."""
    groups: dict[str, list[RawMaterialFile]] = {}
    for f in entry.files:
        stem, _ = _split_name(sanitize(f.name))
        groups.setdefault(stem, []).append(f)

    chosen = []
    for files in groups.values():
        ranked = [f for f in files if f.url and file_type_rank(_file_kind(f)) >= 0]
        if ranked:
            chosen.append(max(ranked, key=lambda f: file_type_rank(_file_kind(f))))
    return chosen


def markup_extra_material(entries: list[RawMaterial]) -> list[Talk]:
    """Material hung off a meeting or session, as EXTRA_MATERIAL talks.

    The parent carries no URL; each usable file is a sub-talk. Entries
    without a usable file are dropped.
    """
    talks = []
    for entry in entries:
        sub_talks = []
        for f in unique_files(entry):
            stem, suffix = _split_name(sanitize(f.name))
            if not suffix and f.type:
                suffix = "." + f.type.lstrip(".")
            sub_talks.append(
                Talk(
                    id=entry.id or "",
                    title=entry.title or "",
                    start=EPOCH_ZERO,
                    end=EPOCH_ZERO,
                    kind=TalkKind.EXTRA_MATERIAL,
                    best_material_url=sanitize(f.url),
                    best_material_display_name=stem,
                    best_material_extension=suffix,
                )
            )
        if not sub_talks:
            continue
        talks.append(
            Talk(
                id=entry.id or "",
                title=entry.title or "",
                start=EPOCH_ZERO,
                end=EPOCH_ZERO,
                kind=TalkKind.EXTRA_MATERIAL,
                sub_talks=sub_talks,
            )
        )
    return talks


# =============================================================================
# JSON EXPORT
# =============================================================================

def json_folder_materials(folder: RawJsonFolder) -> list[TalkMaterial]:
    """Attachments of one folder. Attachments without any URL are skipped."""
    result = []
    for attachment in folder.attachments:
        url = sanitize(attachment.download_url or attachment.link_url)
        if not url:
            continue
        result.append(
            TalkMaterial(
                url=url,
                display_name=attachment.title or "",
                extension=_url_suffix(url),
                material_type=folder.title,
            )
        )
    return result


def json_talk_materials(folders: list[RawJsonFolder]) -> list[TalkMaterial]:
    return [m for folder in folders for m in json_folder_materials(folder)]


def json_extra_material(folders: list[RawJsonFolder]) -> list[Talk]:
    """Folders on a meeting or session, one sub-talk per attachment."""
    talks = []
    for folder in folders:
        materials = json_folder_materials(folder)
        if not materials:
            continue
        sub_talks = [
            Talk(
                id="0",
                start=EPOCH_ZERO_UTC,
                end=EPOCH_ZERO_UTC,
                kind=TalkKind.EXTRA_MATERIAL,
                best_material_url=m.url,
                best_material_display_name=m.display_name,
                best_material_extension=m.extension,
                all_material=[m],
            )
            for m in materials
        ]
        talks.append(
            Talk(
                id=folder.id or "",
                title=folder.title or "",
                start=EPOCH_ZERO_UTC,
                end=EPOCH_ZERO_UTC,
                kind=TalkKind.EXTRA_MATERIAL,
                sub_talks=sub_talks,
            )
        )
    return talks
