"""Turns API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from kolviz.api.dependencies import get_repository
from kolviz.api.repository import LogRepository
from kolviz.api.schemas import TurnListResponse, TurnResponse, build_turn

router = APIRouter(prefix="/api/turns", tags=["turns"])


@router.get("", response_model=TurnListResponse)
def list_turns(
    area: Optional[str] = Query(None, description="Only turns spent in this area"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of turns"),
    repo: LogRepository = Depends(get_repository),
) -> TurnListResponse:
    """List turns in log order. Pre-parsed logs have no single turns."""
    turns = repo.get_turns(area=area, limit=limit)
    return TurnListResponse(
        turns=[build_turn(t) for t in turns],
        total=len(turns),
    )


@router.get("/{turn_number}", response_model=TurnResponse)
def get_turn(
    turn_number: int,
    repo: LogRepository = Depends(get_repository),
) -> TurnResponse:
    """Get a single turn with its encounters."""
    turn = repo.get_turn(turn_number)
    if turn is None:
        raise HTTPException(status_code=404, detail="Turn not found")
    return build_turn(turn, include_encounters=True)
