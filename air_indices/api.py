from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from .config import HISTORY_CAPACITY
from .schemas import (
    BreakdownResponse,
    CorrelationResponse,
    DataResponse,
    HealthResponse,
    HistoryResponse,
    ScatterbarResponse,
)
from .service import IndicesService, get_service

router = APIRouter(tags=["indices"])


@router.get("/data", response_model=DataResponse)
def read_data(service: IndicesService = Depends(get_service)):
    return service.current()


@router.get("/history", response_model=HistoryResponse)
def read_history(sec: int = Query(HISTORY_CAPACITY, ge=1, description="Lookback in seconds"),
                 service: IndicesService = Depends(get_service)):
    return service.history_series(sec)


@router.get("/corr", response_model=CorrelationResponse)
def read_correlations(vars_: str = Query("co2,no2,nh3,co", alias="vars", description="Comma separated variables"),
                      sec: int = Query(1800, ge=1),
                      service: IndicesService = Depends(get_service)):
    names = [name.strip() for name in vars_.split(",") if name.strip()]
    if not names:
        raise HTTPException(status_code=400, detail="vars must name at least one variable")
    return service.correlations(names, sec)


@router.get("/scatterbar", response_model=ScatterbarResponse)
def read_scatterbar(sec: int = Query(3600, ge=1),
                    x: str = Query("temp"),
                    y: str = Query("rh"),
                    step: int = Query(60, ge=1, description="Keep every step-th sample"),
                    service: IndicesService = Depends(get_service)):
    return service.scatterbar(sec, x, y, step)


@router.get("/gaqi-breakdown", response_model=BreakdownResponse)
def read_gaqi_breakdown(service: IndicesService = Depends(get_service)):
    return service.breakdown()


@router.get("/health", response_model=HealthResponse)
def read_health(service: IndicesService = Depends(get_service)):
    return service.health()
