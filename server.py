"""
Sprout Web Server

FastAPI-based web server for Sprout growth charts and WHO analysis.
"""

import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Depends
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Setup paths
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from sprout.config import configure_logging, get_config
from sprout.models import (
    ChartMode,
    ChildProfile,
    Gender,
    GrowthAnalysis,
    GrowthChartView,
    Measurement,
    MeasurementType,
    ReferenceSample,
)
from sprout.engines import (
    assemble_growth_chart,
    classify_measurement,
    find_reference_row,
    resolve_age_in_months,
    resolve_reference,
)
from sprout.engines.constants import MAX_AGE_MONTHS
from sprout.db.client import is_configured as db_configured
from sprout.db.repositories import ChildRepository, GrowthRecordRepository, WHOStandardRepository


configure_logging()

# Create FastAPI app
app = FastAPI(
    title="Sprout",
    description="Sprout - Child Growth Analysis API",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class ChartRequest(BaseModel):
    """Request model for chart assembly."""
    child: ChildProfile = Field(default_factory=ChildProfile, description="Birth date, gender and approximate age")
    measurements: list[Measurement] = Field(default_factory=list, description="Growth records of any type")
    value_type: MeasurementType = Field(MeasurementType.WEIGHT, description="height or weight")
    mode: Optional[ChartMode] = Field(None, description="yearly or half-yearly (default from config)")
    reference: Optional[list[ReferenceSample]] = Field(
        None, description="WHO rows; omitted or empty means the approximate curve is used"
    )
    today: Optional[date] = Field(None, description="Reference date for birth date estimation")


class AnalyzeRequest(BaseModel):
    """Request model for single measurement analysis."""
    value: float = Field(..., gt=0, description="Measured value (kg or cm)")
    age_in_months: int = Field(..., description="Child age at measurement, clamped to 0-120")
    gender: Gender = Field(Gender.MALE, description="male or female")
    value_type: MeasurementType = Field(MeasurementType.WEIGHT, description="height or weight")
    reference: Optional[list[ReferenceSample]] = Field(
        None, description="WHO rows to pick the matching age from"
    )


class AgeRequest(BaseModel):
    """Request model for age resolution."""
    measurement_date: date
    birth_date: Optional[date] = None
    age_in_months: int = Field(0, ge=0, description="Approximate current age when birth date is unknown")
    today: Optional[date] = None


class AgeResponse(BaseModel):
    """Age in months at a measurement date."""
    age_in_months: int
    estimated: bool


# Repository dependencies (overridden in tests)
def _require_db():
    if not db_configured():
        raise HTTPException(status_code=503, detail="Database not configured")


def get_child_repository() -> ChildRepository:
    _require_db()
    return ChildRepository()


def get_growth_repository() -> GrowthRecordRepository:
    _require_db()
    return GrowthRecordRepository()


def get_who_repository() -> WHOStandardRepository:
    _require_db()
    return WHOStandardRepository()


# Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "database": db_configured(),
    }


@app.post("/api/growth/chart", response_model=GrowthChartView)
async def growth_chart(request: ChartRequest):
    """
    Assemble a growth chart from posted data.

    Without reference rows the approximate WHO curve is used and
    `reference_available` is false in the response.
    """
    return assemble_growth_chart(
        request.measurements,
        request.child,
        request.value_type,
        mode=request.mode or get_config().default_mode,
        reference_samples=request.reference or [],
        today=request.today,
    )


@app.post("/api/growth/analyze", response_model=GrowthAnalysis)
async def analyze_measurement(request: AnalyzeRequest):
    """Classify one measurement against the WHO row for its age."""
    age = max(0, min(MAX_AGE_MONTHS, request.age_in_months))
    resolution = resolve_reference(request.reference or [], request.gender)
    row = find_reference_row(resolution.samples, age)
    if row is None:
        raise HTTPException(status_code=404, detail="No reference data for this age")
    return classify_measurement(
        request.value,
        age,
        request.gender,
        row,
        request.value_type,
    )


@app.post("/api/growth/age", response_model=AgeResponse)
async def measurement_age(request: AgeRequest):
    """Resolve a child's age in months at a measurement date."""
    months = resolve_age_in_months(
        request.measurement_date,
        birth_date=request.birth_date,
        fallback_age_in_months=request.age_in_months,
        today=request.today,
    )
    return AgeResponse(age_in_months=months, estimated=request.birth_date is None)


@app.get("/api/children/{child_id}/growth/{value_type}", response_model=GrowthChartView)
async def child_growth_chart(
    child_id: str,
    value_type: MeasurementType,
    mode: Optional[ChartMode] = Query(None, description="yearly or half-yearly"),
    children: ChildRepository = Depends(get_child_repository),
    records: GrowthRecordRepository = Depends(get_growth_repository),
    standards: WHOStandardRepository = Depends(get_who_repository),
):
    """
    Assemble the growth chart for a stored child.

    WHO rows come from the database; a failing or empty table falls back
    to the approximate curve.
    """
    child = children.get_by_id(child_id)
    if not child:
        raise HTTPException(status_code=404, detail="Child not found")

    measurements = records.list_for_child(child_id, value_type)
    return assemble_growth_chart(
        measurements,
        child,
        value_type,
        mode=mode or get_config().default_mode,
        provider=standards,
    )


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the server."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
