"""Correction service wrapping the SEC engine for the HTTP layer."""

import asyncio
import logging
from typing import Sequence, Tuple, Union

from services.sec import (
    DEFAULT_SCORING,
    CorrectionInput,
    CorrectionResult,
    GroupScore,
    Point2D,
    ScoringPolicy,
    SecError,
    compute_correction,
    compute_group_score,
    resolve_poib,
)


class CorrectionService:
    """Run correction and scoring off the event loop."""

    def __init__(self, policy: ScoringPolicy = DEFAULT_SCORING):
        self.policy = policy
        self.logger = logging.getLogger("CorrectionService")

    async def calculate(self, data: CorrectionInput) -> Tuple[CorrectionResult, GroupScore]:
        """Compute the scope correction and the group score for one request."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._calculate_sync, data)

    async def score(
        self,
        poib: Union[Point2D, Sequence[Point2D]],
        bull: Point2D,
    ) -> GroupScore:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._score_sync, poib, bull)

    def _calculate_sync(self, data: CorrectionInput) -> Tuple[CorrectionResult, GroupScore]:
        try:
            result = compute_correction(data)
        except SecError as e:
            self.logger.warning("Correction rejected (%s): %s", e.code, e)
            raise

        group = compute_group_score(result.arrow.start, data.bull, self.policy)
        self.logger.info(
            "Correction for %d sample(s) at %.1f yd: windage %s, elevation %s, score %d",
            data.sample_count,
            data.distance_yards,
            result.windage.dial_text,
            result.elevation.dial_text,
            group.score,
        )
        return result, group

    def _score_sync(
        self,
        poib: Union[Point2D, Sequence[Point2D]],
        bull: Point2D,
    ) -> GroupScore:
        try:
            point = resolve_poib(poib)
        except SecError as e:
            self.logger.warning("Score rejected (%s): %s", e.code, e)
            raise
        return compute_group_score(point, bull, self.policy)
