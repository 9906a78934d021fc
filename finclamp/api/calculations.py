"""
Calculator API endpoints.

Each request replays the same flow a browser session runs: hydrate the
store from a query string, apply field edits, recompute, and hand back
the result together with the rewritten query string.
"""

import logging
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from finclamp.calculators import CalculatorSchema, get_calculator, list_calculators
from finclamp.config import get_settings
from finclamp.exceptions import UnknownCalculatorError, UnknownFieldError
from finclamp.state import AddressBar, InputStateStore

logger = logging.getLogger(__name__)

router = APIRouter()


class FieldResponse(BaseModel):
    """Declared input of a calculator."""

    name: str
    default: str
    kind: str
    choices: List[str] = []


class CalculatorResponse(BaseModel):
    """Calculator declaration."""

    id: str
    title: str
    namespace: str
    formula: str
    fields: List[FieldResponse]


class CalculatorListResponse(BaseModel):
    calculators: List[CalculatorResponse]
    total: int


class CalculateInput(BaseModel):
    """Field edits applied on top of an optional existing query string."""

    fields: Dict[str, str] = {}
    query: str = ""


class CalculateResponse(BaseModel):
    """Current fields, result (null when inputs are incomplete) and URL query."""

    calculator_id: str
    fields: Dict[str, str]
    result: Optional[Dict[str, Any]] = None
    query: str


def schema_or_404(calculator_id: str) -> CalculatorSchema:
    """Look up a calculator, translating unknown ids to 404."""
    try:
        return get_calculator(calculator_id)
    except UnknownCalculatorError:
        logger.warning(f"Unknown calculator requested: {calculator_id}")
        raise HTTPException(status_code=404, detail="Calculator not found")


def build_store(
    schema: CalculatorSchema, query: str = "", fields: Optional[Dict[str, str]] = None
) -> InputStateStore:
    """Hydrate a store from ``query`` and apply ``fields`` as edits."""
    address_bar = AddressBar(get_settings().base_url)
    if query:
        address_bar.replace_query(query.lstrip("?"))

    store = InputStateStore(schema, address_bar)
    store.hydrate()
    if fields:
        try:
            store.update_fields(fields)
        except UnknownFieldError as e:
            raise HTTPException(
                status_code=422, detail=f"Unknown field '{e.field_name}'"
            )
    return store


def calculator_to_response(schema: CalculatorSchema) -> CalculatorResponse:
    return CalculatorResponse(
        id=schema.calculator_id,
        title=schema.title,
        namespace=schema.namespace,
        formula=schema.formula,
        fields=[
            FieldResponse(
                name=spec.name,
                default=spec.default,
                kind=spec.kind,
                choices=list(spec.choices),
            )
            for spec in schema.fields
        ],
    )


@router.get("/", response_model=CalculatorListResponse)
async def list_calculator_schemas(formula: Optional[str] = None):
    """List declared calculators, optionally filtered by formula family."""
    schemas = list_calculators()
    if formula:
        schemas = [s for s in schemas if s.formula == formula]

    return CalculatorListResponse(
        calculators=[calculator_to_response(s) for s in schemas],
        total=len(schemas),
    )


@router.get("/{calculator_id}", response_model=CalculatorResponse)
async def get_calculator_schema(calculator_id: str):
    """Get one calculator's declaration."""
    return calculator_to_response(schema_or_404(calculator_id))


@router.post("/{calculator_id}", response_model=CalculateResponse)
async def calculate(calculator_id: str, inputs: CalculateInput):
    """Compute a calculator from a query string and field edits."""
    schema = schema_or_404(calculator_id)
    store = build_store(schema, inputs.query, inputs.fields)

    result = store.last_result
    return CalculateResponse(
        calculator_id=calculator_id,
        fields=dict(store.fields),
        result=dict(result) if result is not None else None,
        query=store.address_bar.query,
    )
