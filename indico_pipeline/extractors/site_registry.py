"""What we have learned about each Indico host.

Hosts are added when a fallback succeeds and never removed, so a second fetch
against the same site goes straight to the dialect that worked.
"""

import threading

# Sites known to run a modern Indico before we ever talk to them
DEFAULT_MODERN_SITES = frozenset({"indico.cern.ch"})
DEFAULT_JSON_SITES = frozenset({"indico.cern.ch"})


class SiteRegistry:
    """Per-host capability flags: modern /event/ paths and JSON export.

    Safe to share between threads and asyncio tasks; nothing is awaited while
    the lock is held.
    """

    def __init__(
        self,
        modern_sites: frozenset[str] = DEFAULT_MODERN_SITES,
        json_sites: frozenset[str] = DEFAULT_JSON_SITES,
    ):
        self._lock = threading.Lock()
        self._seed_modern = frozenset(modern_sites)
        self._seed_json = frozenset(json_sites)
        self._modern: set[str] = set(self._seed_modern)
        self._json: set[str] = set(self._seed_json)

    def uses_modern_format(self, site: str) -> bool:
        with self._lock:
            return site in self._modern

    def uses_json(self, site: str) -> bool:
        with self._lock:
            return site in self._json

    def record_modern_format(self, site: str) -> None:
        with self._lock:
            self._modern.add(site)

    def record_uses_json(self, site: str) -> None:
        with self._lock:
            self._json.add(site)

    def modern_format_sites(self) -> frozenset[str]:
        """Snapshot of the hosts answering on /event/ paths."""
        with self._lock:
            return frozenset(self._modern)

    def json_sites(self) -> frozenset[str]:
        """Snapshot of the hosts serving the JSON export."""
        with self._lock:
            return frozenset(self._json)

    def reset(self) -> None:
        """Forget everything learned, back to the seed sites."""
        with self._lock:
            self._modern = set(self._seed_modern)
            self._json = set(self._seed_json)

    def clear(self) -> None:
        """Empty both sets, seeds included."""
        with self._lock:
            self._modern.clear()
            self._json.clear()

    def __repr__(self) -> str:
        return f"SiteRegistry(modern={sorted(self._modern)}, json={sorted(self._json)})"
