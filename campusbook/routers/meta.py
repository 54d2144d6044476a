from datetime import datetime
from typing import List

from fastapi import APIRouter

from ..schemas import PeriodRead
from ..slots import PERIODS

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}


@router.get("/periods", response_model=List[PeriodRead])
def list_periods() -> List[PeriodRead]:
    return [PeriodRead(period=period, time_range=time_range) for period, time_range in PERIODS.items()]
