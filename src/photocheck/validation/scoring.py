from __future__ import annotations

from typing import List, Tuple

from photocheck.core.models import DEFAULT_CONFIG, ValidationConfig
from photocheck.validation.report import HeuristicReport


def weighted_checks(report: HeuristicReport, config: ValidationConfig = DEFAULT_CONFIG) -> List[Tuple[bool, float]]:
    """(passed, weight) for every scored check, in scoring order."""
    return [
        (report.face_detected, config.face_weight),
        (report.eyes_open, config.eyes_weight),
        (report.proper_lighting, config.lighting_weight),
        (report.white_background, config.background_weight),
    ]


def score(report: HeuristicReport, config: ValidationConfig = DEFAULT_CONFIG) -> float:
    """
    Confidence in [0, 1]: the sum of the weights of the checks that passed.

    Weights are added in check order and not rounded, so face + eyes sums to
    0.6000000000000001 and clears the default 0.6 threshold.
    """
    confidence = 0.0
    for passed, weight in weighted_checks(report, config):
        if passed:
            confidence += weight
    return min(max(confidence, 0.0), 1.0)


def is_passing(confidence: float, config: ValidationConfig = DEFAULT_CONFIG) -> bool:
    return confidence > config.pass_threshold
