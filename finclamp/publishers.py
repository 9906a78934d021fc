"""
Read-only consumers of calculator state.

The comparison tray, share-link builder and summary exporter all work from
a StoreSnapshot and never write back to the store.
"""

import copy
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from jinja2 import Environment, StrictUndefined

from finclamp.config import get_settings
from finclamp.state.store import StoreSnapshot
from finclamp.state.url_codec import build_share_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonEntry:
    """One calculation pinned to the comparison tray."""

    calculator_id: str
    inputs: Dict[str, str]
    result: Dict
    timestamp: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class ComparisonTray:
    """
    Append-only list of pinned calculations, ordered by insertion time.

    Entries are deep copies, so later edits to a calculator do not change
    what was pinned.
    """

    def __init__(self):
        self._entries: List[ComparisonEntry] = []

    def add(self, snapshot: StoreSnapshot) -> Optional[ComparisonEntry]:
        """Pin a snapshot; snapshots without a result are not added."""
        if snapshot.result is None:
            return None

        entry = ComparisonEntry(
            calculator_id=snapshot.calculator_id,
            inputs=dict(snapshot.fields),
            result=copy.deepcopy(dict(snapshot.result)),
            timestamp=datetime.now(timezone.utc),
        )
        self._entries.append(entry)
        logger.info(f"Added {entry.calculator_id} to comparison tray ({len(self._entries)})")
        return entry

    def remove(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before

    def clear(self) -> None:
        self._entries = []

    @property
    def entries(self) -> List[ComparisonEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def build_share_link(snapshot: StoreSnapshot, base_url: Optional[str] = None) -> str:
    """Shareable URL for a snapshot, built on a fresh base URL."""
    return build_share_url(
        base_url or get_settings().base_url,
        snapshot.calculator_id,
        snapshot.namespace,
        snapshot.fields,
        snapshot.defaults,
    )


_env = Environment(
    undefined=StrictUndefined, trim_blocks=True, lstrip_blocks=True, autoescape=False
)


def _number(value) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    return f"{value:,.2f}"


_env.filters["number"] = _number

SUMMARY_TEMPLATE = _env.from_string(
    """{{ title }}
{{ "=" * title|length }}

Inputs
{% for name, value in inputs %}
  {{ name }}: {{ value }}
{% endfor %}

Results
{% if result is none %}
  (enter more details to see results)
{% else %}
{% for name, value in result %}
  {{ name }}: {{ value|number }}
{% endfor %}
{% endif %}
{% if link %}

Link: {{ link }}
{% endif %}
"""
)


def render_summary(
    snapshot: StoreSnapshot, title: Optional[str] = None, base_url: Optional[str] = None
) -> str:
    """
    Render a plain-text summary of a snapshot.

    Only scalar results are listed; breakdown tables are left to richer
    exporters. Inputs left blank are skipped.
    """
    inputs = [(name, value) for name, value in snapshot.fields.items() if value != ""]
    result = None
    if snapshot.result is not None:
        result = [
            (name, value)
            for name, value in snapshot.result.items()
            if not isinstance(value, (list, tuple, dict, Mapping))
        ]

    return SUMMARY_TEMPLATE.render(
        title=title or snapshot.calculator_id,
        inputs=inputs,
        result=result,
        link=build_share_link(snapshot, base_url),
    )
