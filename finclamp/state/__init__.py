"""
Calculator state and URL synchronization.
"""

from finclamp.state.url_codec import (
    AddressBar,
    build_share_url,
    decode_query,
    encode_query,
    get_route,
    set_route,
)
from finclamp.state.store import InputStateStore, StoreSnapshot
from finclamp.state.history import HistoryBridge

__all__ = [
    "AddressBar",
    "HistoryBridge",
    "InputStateStore",
    "StoreSnapshot",
    "build_share_url",
    "decode_query",
    "encode_query",
    "get_route",
    "set_route",
]
