"""Log history API routes - turn intervals, days, equipment and familiars."""

from fastapi import APIRouter, Depends, HTTPException

from kolviz.api.dependencies import get_repository
from kolviz.api.repository import LogRepository
from kolviz.api.schemas import (
    DayResponse,
    EquipmentChangeResponse,
    FamiliarChangeResponse,
    IntervalListResponse,
    build_equipment,
    build_interval,
)
from kolviz.core.models import DayChange, HeaderFooterComment

router = APIRouter(prefix="/api", tags=["log"])


def _build_day(day: DayChange, comment: HeaderFooterComment) -> DayResponse:
    return DayResponse(
        day_number=day.day_number,
        turn_number=day.turn_number,
        header=comment.header or None,
        footer=comment.footer or None,
    )


@router.get("/intervals", response_model=IntervalListResponse)
def list_intervals(repo: LogRepository = Depends(get_repository)) -> IntervalListResponse:
    """List turn intervals (consecutive turns in one area)."""
    intervals = repo.get_intervals()
    return IntervalListResponse(
        intervals=[build_interval(i) for i in intervals],
        total=len(intervals),
    )


@router.get("/days", response_model=list[DayResponse])
def list_days(repo: LogRepository = Depends(get_repository)) -> list[DayResponse]:
    return [_build_day(day, comment) for day, comment in repo.get_day_changes()]


@router.get("/days/{day_number}", response_model=DayResponse)
def get_day(day_number: int, repo: LogRepository = Depends(get_repository)) -> DayResponse:
    entry = repo.get_day_change(day_number)
    if entry is None:
        raise HTTPException(status_code=404, detail="Day not found")
    return _build_day(*entry)


@router.get("/equipment", response_model=list[EquipmentChangeResponse])
def list_equipment_changes(
    repo: LogRepository = Depends(get_repository),
) -> list[EquipmentChangeResponse]:
    """Equipment history, one entry per change."""
    return [build_equipment(c) for c in repo.get_equipment_changes()]


@router.get("/familiars", response_model=list[FamiliarChangeResponse])
def list_familiar_changes(
    repo: LogRepository = Depends(get_repository),
) -> list[FamiliarChangeResponse]:
    return [
        FamiliarChangeResponse(familiar_name=c.familiar_name, turn_number=c.turn_number)
        for c in repo.get_familiar_changes()
    ]
