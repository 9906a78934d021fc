"""
Query-string codec endpoints.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import Dict, Optional

from finclamp.api.calculations import build_store, schema_or_404
from finclamp.publishers import build_share_link
from finclamp.state import decode_query, get_route

router = APIRouter()


class DecodeInput(BaseModel):
    calculator_id: str
    query: str


class DecodeResponse(BaseModel):
    """Namespaced parameters found in the query and the resulting fields."""

    calculator_id: str
    route: Optional[str] = None
    params: Dict[str, str]
    fields: Dict[str, str]


class EncodeInput(BaseModel):
    calculator_id: str
    fields: Dict[str, str]
    query: str = ""


class EncodeResponse(BaseModel):
    query: str


class ShareInput(BaseModel):
    calculator_id: str
    fields: Dict[str, str] = {}
    base_url: Optional[str] = None


class ShareResponse(BaseModel):
    url: str


@router.post("/decode", response_model=DecodeResponse)
async def decode(inputs: DecodeInput):
    """Read a calculator's fields out of a query string."""
    schema = schema_or_404(inputs.calculator_id)
    store = build_store(schema, inputs.query)

    return DecodeResponse(
        calculator_id=schema.calculator_id,
        route=get_route(inputs.query.lstrip("?")),
        params=decode_query(inputs.query, schema.namespace),
        fields=dict(store.fields),
    )


@router.post("/encode", response_model=EncodeResponse)
async def encode(inputs: EncodeInput):
    """Write a calculator's fields into a query string, keeping other parameters."""
    schema = schema_or_404(inputs.calculator_id)
    store = build_store(schema, inputs.query, inputs.fields)
    return EncodeResponse(query=store.address_bar.query)


@router.post("/share", response_model=ShareResponse)
async def share(inputs: ShareInput):
    """Build a shareable link for a set of fields."""
    schema = schema_or_404(inputs.calculator_id)
    store = build_store(schema, fields=inputs.fields)
    return ShareResponse(url=build_share_link(store.snapshot(), inputs.base_url))
