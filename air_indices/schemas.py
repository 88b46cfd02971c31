from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class MeasuresPayload(BaseModel):
    co2: Optional[float] = None
    no2: Optional[float] = None
    nh3: Optional[float] = None
    co: Optional[float] = None
    temp: Optional[float] = None
    rh: Optional[float] = None
    pres: Optional[float] = None


class SnapshotPayload(BaseModel):
    timestamp: str
    measures: MeasuresPayload


class IndicesPayload(BaseModel):
    AQL: float
    AQ_penalty: float
    TCI: float
    TCI_penalty_pct: float
    SRI: float
    Volatility_penalty: float
    GEI: float
    corr_co2_no2: float
    corr_co_nh3: float
    GAQI: float


class DataResponse(BaseModel):
    timestamp: str
    measures: MeasuresPayload
    indices: IndicesPayload


class ComponentPayload(BaseModel):
    weight: float
    penalty: float
    contribution: float


class BreakdownResponse(DataResponse):
    components: Dict[str, ComponentPayload]


class HistoryResponse(BaseModel):
    requested_sec: int
    length: int
    series: List[SnapshotPayload]


class CorrelationResponse(BaseModel):
    vars: List[str]
    sec: int
    corr: Dict[str, float]


class ScatterPoint(BaseModel):
    timestamp: str
    x: Optional[float]
    y: Optional[float]
    co2: Optional[float]
    no2: Optional[float]
    nh3: Optional[float]
    co: Optional[float]
    total: float
    event: Optional[str]


class ScatterbarResponse(BaseModel):
    requested_sec: int
    xVar: str
    yVar: str
    step: int
    count: int
    points: List[ScatterPoint]


class HealthResponse(BaseModel):
    ok: bool
    time: str
    historyLen: int
    historyCapacity: int
