"""
Calculator input state.

An InputStateStore holds one calculator's raw field values and its last
result, and keeps the shared address bar in step with them. Every change
runs the same sequence in one call: mutate fields, rewrite this
namespace's query parameters, recompute. Observers therefore never see a
field map that disagrees with the URL.
"""

import copy
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional

from finclamp.calculators import CalculatorSchema, ResultRecord
from finclamp.state.url_codec import AddressBar, decode_query, encode_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    """Read-only view of a store handed to publishers."""

    calculator_id: str
    namespace: str
    fields: Mapping[str, str]
    defaults: Mapping[str, str]
    result: Optional[Mapping]


Listener = Callable[[StoreSnapshot], None]


class InputStateStore:
    """Field values and last result of one mounted calculator."""

    def __init__(self, schema: CalculatorSchema, address_bar: AddressBar):
        self.schema = schema
        self.namespace = schema.namespace
        self.address_bar = address_bar
        self._fields: Dict[str, str] = schema.defaults()
        self._last_result: Optional[ResultRecord] = None
        self._listeners: List[Listener] = []

    @property
    def fields(self) -> Mapping[str, str]:
        return MappingProxyType(self._fields)

    @property
    def last_result(self) -> Optional[Mapping]:
        if self._last_result is None:
            return None
        return MappingProxyType(self._last_result)

    def hydrate(self) -> Mapping[str, str]:
        """
        Load fields from the address bar.

        Declared fields present in the URL override defaults; undeclared
        names are ignored and invalid choice values fall back to the
        default. The URL itself is not rewritten.
        """
        decoded = decode_query(self.address_bar.query, self.namespace)
        fields = self.schema.defaults()
        for name, value in decoded.items():
            if name not in fields:
                logger.debug(f"{self.namespace}: ignoring undeclared parameter {name}")
                continue
            fields[name] = self.schema.validate_field(name, value)

        logger.debug(f"{self.namespace}: hydrated {len(decoded)} parameter(s) from URL")
        self._fields = fields
        self._recompute()
        return self.fields

    def update_field(self, name: str, value: Optional[str]) -> Optional[Mapping]:
        """
        Set one field, sync the URL and recompute.

        Raises:
            UnknownFieldError: If ``name`` is not declared for this calculator
        """
        return self.update_fields({name: value})

    def update_fields(self, values: Mapping[str, Optional[str]]) -> Optional[Mapping]:
        """Set several fields with a single URL write and recomputation."""
        cleaned = {
            name: self.schema.validate_field(name, value) for name, value in values.items()
        }
        self._fields = {**self._fields, **cleaned}
        logger.debug(f"{self.namespace}: updated {', '.join(cleaned)}")

        self._write_url()
        self._recompute()
        return self.last_result

    def reset(self) -> None:
        """Restore defaults and drop this calculator's query parameters."""
        self._fields = self.schema.defaults()
        self._write_url()
        self._recompute()
        logger.info(f"{self.namespace}: reset to defaults")

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            calculator_id=self.schema.calculator_id,
            namespace=self.namespace,
            fields=MappingProxyType(dict(self._fields)),
            defaults=MappingProxyType(self.schema.defaults()),
            result=(
                None
                if self._last_result is None
                else MappingProxyType(copy.deepcopy(self._last_result))
            ),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every recomputation; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _write_url(self) -> None:
        query = encode_query(
            self.address_bar.query, self.namespace, self._fields, self.schema.defaults()
        )
        self.address_bar.replace_query(query)

    def _recompute(self) -> None:
        self._last_result = self.schema.compute(self._fields)
        if self._listeners:
            snapshot = self.snapshot()
            for listener in list(self._listeners):
                listener(snapshot)
