"""Scope error correction: coordinate frames, correction math and group scoring."""

from services.sec.coordinate_frame import Point2D, SampleSet, centroid, to_inches, to_inches_many
from services.sec.engine import (
    DEFAULT_SCORING,
    SHOOTER_MOA_INCHES_AT_100,
    TRUE_MOA_INCHES_AT_100,
    AxisCorrection,
    CorrectionInput,
    CorrectionResult,
    GroupScore,
    ScoringPolicy,
    compute_correction,
    compute_group_score,
    inches_per_moa,
    resolve_poib,
    round_half_away,
)
from services.sec.errors import (
    EmptySample,
    InvalidClickValue,
    InvalidDistance,
    InvalidMoaStandard,
    InvalidScale,
    SecError,
)

__all__ = [
    "Point2D",
    "SampleSet",
    "centroid",
    "to_inches",
    "to_inches_many",
    "AxisCorrection",
    "CorrectionInput",
    "CorrectionResult",
    "GroupScore",
    "ScoringPolicy",
    "DEFAULT_SCORING",
    "TRUE_MOA_INCHES_AT_100",
    "SHOOTER_MOA_INCHES_AT_100",
    "compute_correction",
    "compute_group_score",
    "inches_per_moa",
    "resolve_poib",
    "round_half_away",
    "SecError",
    "InvalidDistance",
    "InvalidClickValue",
    "InvalidScale",
    "InvalidMoaStandard",
    "EmptySample",
]
