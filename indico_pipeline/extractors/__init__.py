"""Agenda fetching: transports, parsers and format negotiation.

This package:
1. Fetches text through a UrlFetcher (httpx or a local file)
2. Parses it as iconf XML, JSON export or iCal category feed
3. Negotiates between URL/format dialects per host, remembering what worked
"""

from indico_pipeline.extractors.categories import parse_category_feed
from indico_pipeline.extractors.fetch import HttpxFetcher, LocalFileFetcher, UrlFetcher
from indico_pipeline.extractors.negotiation import ConferenceFetcher, Dialect
from indico_pipeline.extractors.parsers import parse_json_export, parse_markup
from indico_pipeline.extractors.site_registry import SiteRegistry

__all__ = [
    "ConferenceFetcher",
    "Dialect",
    "HttpxFetcher",
    "LocalFileFetcher",
    "SiteRegistry",
    "UrlFetcher",
    "parse_category_feed",
    "parse_json_export",
    "parse_markup",
]
