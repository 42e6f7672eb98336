"""URL parsing and request URL building for Indico agendas."""

from indico_pipeline.locators.agenda import (
    build_category_url,
    build_conference_url,
    build_json_url,
    build_markup_url,
    is_valid_category,
    parse_category,
    parse_conference,
)

__all__ = [
    "build_category_url",
    "build_conference_url",
    "build_json_url",
    "build_markup_url",
    "is_valid_category",
    "parse_category",
    "parse_conference",
]
