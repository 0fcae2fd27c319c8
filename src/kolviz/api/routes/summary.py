"""Summary API routes."""

from fastapi import APIRouter, Depends

from kolviz.api.dependencies import get_repository
from kolviz.api.repository import LogRepository
from kolviz.api.schemas import SummaryResponse, build_summary

router = APIRouter(prefix="/api/summary", tags=["summary"])


@router.get("", response_model=SummaryResponse)
def get_summary(repo: LogRepository = Depends(get_repository)) -> SummaryResponse:
    """Get the aggregate summary of the log."""
    return build_summary(repo.summary)
