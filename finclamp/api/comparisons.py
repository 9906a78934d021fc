"""
Comparison tray API endpoints.

Pinned calculations are stored as snapshots; editing a calculator later
does not change what was pinned.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from finclamp.api.calculations import build_store, schema_or_404
from finclamp.config import get_settings
from finclamp.db.database import get_db
from finclamp.db.models import ComparisonRecord
from finclamp.publishers import build_share_link

logger = logging.getLogger(__name__)

router = APIRouter()


class ComparisonCreate(BaseModel):
    """Schema for pinning a calculation."""

    calculator_id: str
    fields: Dict[str, str] = {}
    query: str = ""
    title: Optional[str] = None


class ComparisonResponse(BaseModel):
    """Schema for a pinned calculation."""

    id: str
    calculator_id: str
    title: Optional[str]
    inputs: Dict[str, str]
    result: Dict[str, Any]
    share_url: Optional[str]
    created_at: str


class ComparisonListResponse(BaseModel):
    comparisons: List[ComparisonResponse]
    total: int


def comparison_to_response(record: ComparisonRecord) -> ComparisonResponse:
    """Convert ComparisonRecord model to response schema."""
    return ComparisonResponse(
        id=record.id,
        calculator_id=record.calculator_id,
        title=record.title,
        inputs=record.inputs or {},
        result=record.result or {},
        share_url=record.share_url,
        created_at=record.created_at.isoformat(),
    )


@router.get("/", response_model=ComparisonListResponse)
async def list_comparisons(
    calculator_id: Optional[str] = None, db: Session = Depends(get_db)
):
    """List pinned calculations, oldest first."""
    query = db.query(ComparisonRecord).filter(ComparisonRecord.is_deleted == False)

    if calculator_id:
        query = query.filter(ComparisonRecord.calculator_id == calculator_id)

    records = query.order_by(ComparisonRecord.created_at).all()

    return ComparisonListResponse(
        comparisons=[comparison_to_response(r) for r in records],
        total=len(records),
    )


@router.post("/", response_model=ComparisonResponse, status_code=status.HTTP_201_CREATED)
async def add_comparison(data: ComparisonCreate, db: Session = Depends(get_db)):
    """
    Compute a calculation and pin it to the tray.

    The tray holds at most ``comparison_tray_limit`` pins; remove one to
    make room for another.
    """
    schema = schema_or_404(data.calculator_id)
    snapshot = build_store(schema, data.query, data.fields).snapshot()

    if snapshot.result is None:
        raise HTTPException(
            status_code=422, detail="Enter more details to compute a result"
        )

    limit = get_settings().comparison_tray_limit
    pinned = (
        db.query(ComparisonRecord).filter(ComparisonRecord.is_deleted == False).count()
    )
    if pinned >= limit:
        raise HTTPException(
            status_code=422, detail=f"Comparison tray is full ({limit} pins)"
        )

    record = ComparisonRecord(
        calculator_id=schema.calculator_id,
        title=data.title or schema.title,
        inputs=dict(snapshot.fields),
        result=dict(snapshot.result),
        share_url=build_share_link(snapshot),
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Pinned {record.calculator_id} comparison {record.id}")
    return comparison_to_response(record)


@router.delete("/{comparison_id}")
async def remove_comparison(comparison_id: str, db: Session = Depends(get_db)):
    """Remove one pinned calculation (soft delete)."""
    record = (
        db.query(ComparisonRecord)
        .filter(ComparisonRecord.id == comparison_id, ComparisonRecord.is_deleted == False)
        .first()
    )
    if not record:
        raise HTTPException(status_code=404, detail="Comparison not found")

    record.is_deleted = True
    db.commit()
    return {"deleted": True}


@router.delete("/")
async def clear_comparisons(db: Session = Depends(get_db)):
    """Clear the tray."""
    count = (
        db.query(ComparisonRecord)
        .filter(ComparisonRecord.is_deleted == False)
        .update({ComparisonRecord.is_deleted: True})
    )
    db.commit()
    return {"deleted": count}
