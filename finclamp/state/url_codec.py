"""
Query-string codec.

The address bar is shared by every calculator, so all reads and writes of
it go through this module. Each calculator owns the parameters that start
with its namespace (``emi_loanAmount=500000``); everything else in the
query, including the reserved ``in`` route selector, is left byte-for-byte
as it was.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote_plus, unquote_plus, urlencode, urlsplit, urlunsplit

from finclamp.config import get_settings

logger = logging.getLogger(__name__)


class AddressBar:
    """
    The browser address bar and its session history.

    ``replace_state`` rewrites the current entry (ordinary edits), while
    ``push_state`` adds an entry that back/forward can return to. ``go``
    moves through the entries the way ``history.go`` does.
    """

    def __init__(self, url: str = "http://localhost/"):
        self._entries: List[str] = [url]
        self._index = 0

    @property
    def url(self) -> str:
        return self._entries[self._index]

    @property
    def query(self) -> str:
        return urlsplit(self.url).query

    @property
    def history_length(self) -> int:
        return len(self._entries)

    def replace_state(self, url: str) -> None:
        self._entries[self._index] = url

    def push_state(self, url: str) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(url)
        self._index += 1

    def replace_query(self, query: str) -> None:
        parts = urlsplit(self.url)
        self.replace_state(urlunsplit(parts._replace(query=query)))

    def go(self, delta: int) -> bool:
        """Move ``delta`` entries through history; False when out of range."""
        target = self._index + delta
        if delta == 0 or target < 0 or target >= len(self._entries):
            return False
        self._index = target
        return True


def _split_pairs(query: str) -> Iterable[Tuple[str, str, str]]:
    """Yield (raw segment, key, value) for each ``&``-separated pair."""
    for segment in query.lstrip("?").split("&"):
        if not segment:
            continue
        raw_key, _, raw_value = segment.partition("=")
        key = unquote_plus(raw_key)
        if not key:
            logger.debug(f"Ignoring query segment without a key: {segment!r}")
            continue
        yield segment, key, unquote_plus(raw_value)


def decode_query(query: str, namespace: str) -> Dict[str, str]:
    """
    Read one calculator's fields out of a query string.

    Keys that start with ``namespace`` are returned with the prefix removed.
    Other keys, and keys that consist of the bare namespace, are ignored.
    When a key repeats, the last value wins.

    Args:
        query: Raw query string, with or without the leading ``?``
        namespace: Calculator namespace, e.g. ``"emi_"``

    Returns:
        Field name to raw value (empty when the calculator has no parameters)
    """
    fields: Dict[str, str] = {}
    for _, key, value in _split_pairs(query):
        if key.startswith(namespace) and len(key) > len(namespace):
            fields[key[len(namespace) :]] = value
    return fields


def _namespaced_pairs(
    namespace: str, fields: Mapping[str, str], defaults: Mapping[str, str]
) -> List[Tuple[str, str]]:
    return [
        (f"{namespace}{name}", value)
        for name, value in fields.items()
        if value != "" and value != defaults.get(name, "")
    ]


def encode_query(
    query: str,
    namespace: str,
    fields: Mapping[str, str],
    defaults: Mapping[str, str],
    reserved: Optional[Iterable[str]] = None,
) -> str:
    """
    Write one calculator's fields into an existing query string.

    Existing parameters of ``namespace`` are replaced by the fields that are
    neither empty nor equal to their default, written in field order where
    the namespace's first parameter stood (appended if it had none).
    Parameters of other namespaces and reserved keys keep their original
    text and position.

    Returns:
        The new query string (without ``?``)
    """
    reserved = set(get_settings().reserved_params if reserved is None else reserved)
    written = urlencode(_namespaced_pairs(namespace, fields, defaults))

    segments: List[str] = []
    placed = False
    for segment, key, _ in _split_pairs(query):
        if key in reserved or not key.startswith(namespace):
            segments.append(segment)
        elif not placed:
            placed = True
            if written:
                segments.append(written)

    if not placed and written:
        segments.append(written)
    return "&".join(segments)


def build_share_url(
    base_url: str,
    calculator_id: str,
    namespace: str,
    fields: Mapping[str, str],
    defaults: Mapping[str, str],
) -> str:
    """
    Build a shareable link on a fresh base URL.

    The link carries the route selector and the calculator's non-default
    fields only, so parameters of other calculators never leak into it.
    """
    param = get_settings().calculator_param
    parts = urlsplit(base_url)
    query = f"{param}={quote_plus(calculator_id)}"
    written = urlencode(_namespaced_pairs(namespace, fields, defaults))
    if written:
        query = f"{query}&{written}"
    return urlunsplit(parts._replace(query=query, fragment=""))


def set_route(query: str, calculator_id: str) -> str:
    """Point the reserved route selector at ``calculator_id``, keeping its position."""
    param = get_settings().calculator_param
    segment = f"{param}={quote_plus(calculator_id)}"
    pairs = list(_split_pairs(query))
    if not any(key == param for _, key, _ in pairs):
        return "&".join([segment] + [raw for raw, _, _ in pairs])
    return "&".join(segment if key == param else raw for raw, key, _ in pairs)


def get_route(query: str) -> Optional[str]:
    """Return the calculator selected by the reserved route parameter, if any."""
    param = get_settings().calculator_param
    route = None
    for _, key, value in _split_pairs(query):
        if key == param:
            route = value
    return route
