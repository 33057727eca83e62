"""JavaScript call formatting for the map page."""

import json

# Only the most recent call of these matters
COALESCED_FUNCTIONS = frozenset({"setAnimatedUrl", "setOverlayOpacity", "setView"})


def format_js_call(function: str, *args) -> str:
    """Build a call to a template function, skipped if the page lacks it."""
    arguments = ", ".join(json.dumps(arg) for arg in args)
    return f"if (typeof {function} === 'function') {{ {function}({arguments}); }}"


class PendingScripts:
    """Scripts queued until the map page has loaded.

    Repeated calls to a function in COALESCED_FUNCTIONS replace the earlier
    queued one and move to the end, so a page that takes a while to load
    does not accumulate a backlog of frame URLs.
    """

    def __init__(self):
        self._entries: list[tuple[str, str]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, function: str, js_code: str) -> None:
        if function in COALESCED_FUNCTIONS:
            self._entries = [entry for entry in self._entries if entry[0] != function]
        self._entries.append((function, js_code))

    def drain(self) -> list[str]:
        """Remove and return the queued scripts in replay order."""
        entries, self._entries = self._entries, []
        return [js_code for _, js_code in entries]
