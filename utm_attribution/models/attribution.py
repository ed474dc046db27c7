"""
Attribution record

The UTM tags, referring origin, capture time and landing page for one
request. Records are rebuilt on every request; the only persistence is the
set of `u_*` cookies on the client.
"""
from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import quote, unquote

from pydantic import BaseModel, Field

DIRECT = "Direct"

# Record fields in bake order
UTM_DIMENSIONS = ("source", "medium", "term", "content", "campaign")
RECORD_FIELDS = UTM_DIMENSIONS + ("from_", "time", "landing_page")

# Query parameters read on every request
PARAM_NAMES = {
    "source": "utm_source",
    "medium": "utm_medium",
    "term": "utm_term",
    "content": "utm_content",
    "campaign": "utm_campaign",
}

# Client-side storage
COOKIE_NAMES = {
    "source": "u_source",
    "medium": "u_medium",
    "term": "u_term",
    "content": "u_content",
    "campaign": "u_campaign",
    "from_": "u_from",
    "time": "u_time",
    "landing_page": "u_lp",
}

# Keys written into the ASGI scope for downstream handlers
CONTEXT_KEYS = {
    "source": "utm.source",
    "medium": "utm.medium",
    "term": "utm.term",
    "content": "utm.content",
    "campaign": "utm.campaign",
    "from_": "utm.from",
    "time": "utm.time",
    "landing_page": "utm.lp",
}


def present(value: Optional[str]) -> Optional[str]:
    """Empty strings count as absent."""
    return value or None


def cookie_value(cookies: Mapping[str, str], name: str) -> Optional[str]:
    """Read a percent-encoded `u_*` cookie; empty counts as absent."""
    return present(unquote(cookies.get(name) or ""))


def _to_timestamp(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class AttributionRecord(BaseModel):
    """Merged attribution for a single request"""
    source: Optional[str] = None
    medium: Optional[str] = None
    term: Optional[str] = None
    content: Optional[str] = None
    campaign: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    time: Optional[int] = None
    landing_page: Optional[str] = None

    class Config:
        populate_by_name = True

    def is_attached(self) -> bool:
        """A record is exposed downstream only once it has a source or an origin."""
        return bool(self.source or self.from_)

    def context_items(self) -> List[Tuple[str, Any]]:
        return [(CONTEXT_KEYS[name], getattr(self, name)) for name in RECORD_FIELDS]

    def cookie_items(self) -> List[Tuple[str, str]]:
        """Cookie name/value pairs for every non-empty field, percent-encoded."""
        items = []
        for name in RECORD_FIELDS:
            value = getattr(self, name)
            if value is None or value == "":
                continue
            items.append((COOKIE_NAMES[name], quote(str(value), safe="")))
        return items

    @classmethod
    def from_cookies(cls, cookies: Mapping[str, str]) -> "AttributionRecord":
        """
        Build a record purely from previously baked cookies.

        This is what the client had stored before the current request; it
        plays no part in the per-request merge.
        """
        values = {name: cookie_value(cookies, COOKIE_NAMES[name]) for name in RECORD_FIELDS}
        values["time"] = _to_timestamp(values["time"])
        return cls(**values)

    @classmethod
    def from_context(cls, scope: Mapping[str, Any]) -> Optional["AttributionRecord"]:
        """Rebuild the record injected into a request scope, or None if none was."""
        if not any(key in scope for key in CONTEXT_KEYS.values()):
            return None
        return cls(**{name: scope.get(key) for name, key in CONTEXT_KEYS.items()})
