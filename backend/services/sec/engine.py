"""Scope error correction (SEC) engine.

One sign convention holds everywhere in this module::

    correction = bull - POIB

in the canonical inch frame (+X right, +Y up). A positive ``dx`` means the
shot group sits left of the bull and the scope must be dialled RIGHT; a
positive ``dy`` means the group is low and the scope must be dialled UP.

Every displayed magnitude is rounded to two decimals, half away from zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Sequence, Union

from services.sec.coordinate_frame import Point2D, SampleSet, centroid
from services.sec.errors import (
    InvalidClickValue,
    InvalidDistance,
    InvalidMoaStandard,
)


TRUE_MOA_INCHES_AT_100 = 1.047
SHOOTER_MOA_INCHES_AT_100 = 1.0

RIGHT, LEFT = "RIGHT", "LEFT"
UP, DOWN = "UP", "DOWN"

TIGHT_SCORE = 90
GOOD_SCORE = 75
TIP_TIGHT = "tight group, confirm with another group"
TIP_GOOD = "good, focus on grip/trigger"
TIP_FUNDAMENTALS = "fundamentals: sight picture + press, run another group"


def round_half_away(value: float, places: int = 2) -> float:
    """Round half away from zero.

    The float is quantised through its shortest repr, so ``1.005`` rounds to
    ``1.01`` the way it reads rather than the way it is stored.
    """
    if not math.isfinite(value):
        return float(value)
    exact = Decimal(repr(float(value)))
    with localcontext() as ctx:
        # quantize must hold every integer digit plus the kept places
        ctx.prec = max(28, exact.adjusted() + places + 2)
        rounded = exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    # + 0.0 folds -0.0 into 0.0
    return float(rounded) + 0.0


def inches_per_moa(distance_yards: float, true_moa_inches_at_100: float = TRUE_MOA_INCHES_AT_100) -> float:
    """Inches subtended by one minute of angle at ``distance_yards``."""
    if distance_yards <= 0:
        raise InvalidDistance(f"distanceYards must be > 0, got {distance_yards}")
    if true_moa_inches_at_100 <= 0:
        raise InvalidMoaStandard(f"trueMoaInchesAt100 must be > 0, got {true_moa_inches_at_100}")
    ipm = true_moa_inches_at_100 * (distance_yards / 100.0)
    if ipm <= 0:
        raise InvalidDistance(f"distanceYards {distance_yards} is too small to resolve")
    return ipm


@dataclass(frozen=True)
class CorrectionInput:
    bull: Point2D
    poib: Union[Point2D, SampleSet]
    distance_yards: float
    click_value_moa: float
    true_moa_inches_at_100: float = TRUE_MOA_INCHES_AT_100

    def __post_init__(self):
        if self.distance_yards <= 0:
            raise InvalidDistance(f"distanceYards must be > 0, got {self.distance_yards}")
        if self.click_value_moa <= 0:
            raise InvalidClickValue(f"clickValueMoa must be > 0, got {self.click_value_moa}")
        if self.true_moa_inches_at_100 <= 0:
            raise InvalidMoaStandard(
                f"trueMoaInchesAt100 must be > 0, got {self.true_moa_inches_at_100}"
            )
        if not isinstance(self.poib, Point2D):
            object.__setattr__(self, "poib", tuple(self.poib))

    @property
    def sample_count(self) -> int:
        return 1 if isinstance(self.poib, Point2D) else len(self.poib)


@dataclass(frozen=True)
class Delta:
    dx: float
    dy: float


@dataclass(frozen=True)
class AxisCorrection:
    direction: str
    moa: float
    clicks: float

    @property
    def dial_text(self) -> str:
        return f"{self.direction} {self.clicks:.2f} clicks"


@dataclass(frozen=True)
class CorrectionArrow:
    """Render primitive, always drawn from the POIB to the bull."""

    start: Point2D
    end: Point2D


@dataclass(frozen=True)
class CorrectionResult:
    delta_inches: Delta
    windage: AxisCorrection
    elevation: AxisCorrection
    poib: Point2D
    inches_per_moa: float
    arrow: CorrectionArrow


@dataclass(frozen=True)
class ScoringPolicy:
    """Coefficients of the offset-only score: ``perfect - offset * points_per_inch``."""

    perfect_score: float = 100.0
    points_per_inch: float = 10.0


DEFAULT_SCORING = ScoringPolicy()


@dataclass(frozen=True)
class GroupScore:
    offset_inches: float
    score: int
    tip: str


def resolve_poib(poib: Union[Point2D, Sequence[Point2D]]) -> Point2D:
    if isinstance(poib, Point2D):
        return poib
    return centroid(poib)


def _axis(delta: float, positive: str, negative: str, ipm: float, click_value_moa: float) -> AxisCorrection:
    moa = abs(delta) / ipm
    if not math.isfinite(moa):
        raise InvalidDistance(f"distance is too small to express a {abs(delta)} inch offset in MOA")
    clicks = moa / click_value_moa
    if not math.isfinite(clicks):
        raise InvalidClickValue(f"clickValueMoa {click_value_moa} is too small for {moa} MOA")
    return AxisCorrection(
        direction=positive if delta >= 0 else negative,
        moa=round_half_away(moa),
        clicks=round_half_away(clicks),
    )


def compute_correction(data: CorrectionInput) -> CorrectionResult:
    """Windage and elevation needed to move the POIB onto the bull."""
    poib = resolve_poib(data.poib)

    dx = data.bull.x - poib.x
    dy = data.bull.y - poib.y

    ipm = inches_per_moa(data.distance_yards, data.true_moa_inches_at_100)
    if data.click_value_moa <= 0:
        raise InvalidClickValue(f"clickValueMoa must be > 0, got {data.click_value_moa}")

    return CorrectionResult(
        delta_inches=Delta(round_half_away(dx), round_half_away(dy)),
        windage=_axis(dx, RIGHT, LEFT, ipm, data.click_value_moa),
        elevation=_axis(dy, UP, DOWN, ipm, data.click_value_moa),
        poib=Point2D(round_half_away(poib.x), round_half_away(poib.y)),
        inches_per_moa=ipm,
        arrow=CorrectionArrow(start=poib, end=data.bull),
    )


def score_tip(score: int) -> str:
    if score >= TIGHT_SCORE:
        return TIP_TIGHT
    if score >= GOOD_SCORE:
        return TIP_GOOD
    return TIP_FUNDAMENTALS


def compute_group_score(poib: Point2D, bull: Point2D, policy: ScoringPolicy = DEFAULT_SCORING) -> GroupScore:
    """Offset-only group score in [0, 100]; closer to the bull scores higher."""
    offset = math.hypot(poib.x - bull.x, poib.y - bull.y)
    raw = policy.perfect_score - offset * policy.points_per_inch
    score = int(round_half_away(max(0.0, min(100.0, raw)), 0))
    return GroupScore(
        offset_inches=round_half_away(offset),
        score=score,
        tip=score_tip(score),
    )
