"""Scope correction router: clicks, MOA and group score from shot positions."""

from typing import List, Literal, Optional, Sequence, Tuple, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, model_validator

from services.correction_service import CorrectionService
from services.sec import (
    SHOOTER_MOA_INCHES_AT_100,
    TRUE_MOA_INCHES_AT_100,
    AxisCorrection,
    CorrectionInput,
    GroupScore,
    Point2D,
    SecError,
    to_inches,
    to_inches_many,
)

router = APIRouter()


class XYPoint(BaseModel):
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class PointSource(BaseModel):
    """Bull plus either a POIB or the raw holes, in inches or pixels."""
    bull: XYPoint = Field(default_factory=lambda: XYPoint(x=0.0, y=0.0))
    poib: Optional[XYPoint] = None
    holes: Optional[List[XYPoint]] = None
    pxPerInch: Optional[float] = Field(None, allow_inf_nan=False)
    yAxis: Optional[Literal["down", "up"]] = None

    @model_validator(mode="after")
    def _check_point_source(self):
        if (self.poib is None) == (self.holes is None):
            raise ValueError("provide exactly one of 'poib' or 'holes'")
        if self.pxPerInch is not None and self.yAxis is None:
            raise ValueError("'yAxis' is required when 'pxPerInch' is given")
        if self.pxPerInch is None and self.yAxis is not None:
            raise ValueError("'yAxis' only applies to pixel input; give 'pxPerInch' as well")
        return self


class CalcRequest(PointSource):
    distanceYards: float = Field(allow_inf_nan=False)
    clickValueMoa: float = Field(0.25, allow_inf_nan=False)
    trueMoa: bool = True
    trueMoaInchesAt100: Optional[float] = Field(None, allow_inf_nan=False)


class ScoreRequest(PointSource):
    pass


class Deltas(BaseModel):
    dx: float
    dy: float


class AxisResult(BaseModel):
    direction: str
    moa: float
    clicks: float
    dial: str


class Arrow(BaseModel):
    x1: float
    y1: float
    x2: float
    y2: float


class ScoreResult(BaseModel):
    offsetInches: float
    score: int
    tip: str


class CalcInputs(BaseModel):
    distanceYards: float
    clickValueMoa: float
    trueMoaInchesAt100: float
    sampleCount: int
    bull: XYPoint


class CalcResult(BaseModel):
    inputs: CalcInputs
    poib: XYPoint
    deltas: Deltas
    windage: AxisResult
    elevation: AxisResult
    inchesPerMoa: float
    arrow: Arrow
    score: ScoreResult


class CalcResponse(BaseModel):
    success: bool
    data: CalcResult


class ScoreResponse(BaseModel):
    success: bool
    data: ScoreResult


def _sec_http_error(e: SecError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": e.code, "message": str(e)})


def resolve_points(request: PointSource) -> Tuple[Point2D, Union[Point2D, Sequence[Point2D]]]:
    """Return the bull and the POIB (or hole set) in canonical inches."""
    bull = Point2D(request.bull.x, request.bull.y)

    if request.pxPerInch is None:
        if request.poib is not None:
            return bull, Point2D(request.poib.x, request.poib.y)
        return bull, tuple(Point2D(h.x, h.y) for h in request.holes)

    # Pixel input: the bull pixel becomes the origin of the inch frame.
    origin = bull
    if request.poib is not None:
        poib = to_inches(Point2D(request.poib.x, request.poib.y), origin, request.pxPerInch, request.yAxis)
        return Point2D(0.0, 0.0), poib
    holes = to_inches_many(
        [Point2D(h.x, h.y) for h in request.holes],
        origin,
        request.pxPerInch,
        request.yAxis,
    )
    return Point2D(0.0, 0.0), holes


def _axis_result(axis: AxisCorrection) -> AxisResult:
    return AxisResult(direction=axis.direction, moa=axis.moa, clicks=axis.clicks, dial=axis.dial_text)


def _score_result(group: GroupScore) -> ScoreResult:
    return ScoreResult(offsetInches=group.offset_inches, score=group.score, tip=group.tip)


@router.post("/calc", response_model=CalcResponse)
async def calculate_correction(request: CalcRequest):
    """Calculate clicks to move the POIB onto the bull (correction = bull - POIB)."""
    if request.trueMoaInchesAt100 is not None:
        moa_inches = request.trueMoaInchesAt100
    else:
        moa_inches = TRUE_MOA_INCHES_AT_100 if request.trueMoa else SHOOTER_MOA_INCHES_AT_100

    try:
        bull, poib = resolve_points(request)
        data = CorrectionInput(
            bull=bull,
            poib=poib,
            distance_yards=request.distanceYards,
            click_value_moa=request.clickValueMoa,
            true_moa_inches_at_100=moa_inches,
        )
        result, group = await CorrectionService().calculate(data)
    except SecError as e:
        raise _sec_http_error(e) from e

    return CalcResponse(
        success=True,
        data=CalcResult(
            inputs=CalcInputs(
                distanceYards=data.distance_yards,
                clickValueMoa=data.click_value_moa,
                trueMoaInchesAt100=data.true_moa_inches_at_100,
                sampleCount=data.sample_count,
                bull=request.bull,
            ),
            poib=XYPoint(x=result.poib.x, y=result.poib.y),
            deltas=Deltas(dx=result.delta_inches.dx, dy=result.delta_inches.dy),
            windage=_axis_result(result.windage),
            elevation=_axis_result(result.elevation),
            inchesPerMoa=result.inches_per_moa,
            arrow=Arrow(
                x1=result.arrow.start.x,
                y1=result.arrow.start.y,
                x2=result.arrow.end.x,
                y2=result.arrow.end.y,
            ),
            score=_score_result(group),
        ),
    )


@router.post("/score", response_model=ScoreResponse)
async def score_group(request: ScoreRequest):
    """Offset-only score for a group."""
    try:
        bull, poib = resolve_points(request)
        group = await CorrectionService().score(poib, bull)
    except SecError as e:
        raise _sec_http_error(e) from e

    return ScoreResponse(success=True, data=_score_result(group))
