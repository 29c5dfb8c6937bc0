"""
Scenario interpolator.

Produces the "improvement timeline" between two scenarios: for step i of N,
t = i / (N - 1), every derived feature is blended as (1 - t) * a + t * b and
the blend is scored.

Booleans and sex are blended as their 0/1 values too, so intermediate steps
are virtual scenarios (e.g. "0.3 of a smoker"). Only their scores are
meaningful; they are never turned back into FeatureVector objects. Snapping
booleans at the midpoint would change the shape of the curve, so it is not
done here.

The linear score moves linearly in t, so the curve runs monotonically from
score(start) to score(end), bent by the logistic transform.
"""

import typing
from dataclasses import dataclass

from .disease import DiseaseRegistry, get_model
from .errors import InvalidArgumentError
from .features import FEATURE_NAMES, FeatureVector, derive
from .scorer import score_values

# 0..10, as in the interactive predictor
DEFAULT_STEPS = 11


@dataclass(frozen=True)
class TimelinePoint:
    """
    Attributes:
        step: Interpolation step index, 0..steps-1.
        risk: Score of the blended scenario at this step.
    """

    step: int
    risk: float

    def to_dict(self) -> dict[str, typing.Any]:
        return {"step": self.step, "risk": self.risk}


def blend(
    start_values: typing.Mapping[str, float],
    end_values: typing.Mapping[str, float],
    t: float,
) -> dict[str, float]:
    """Linear blend of two derived-value mappings at fraction t (0 -> start, 1 -> end)."""
    return {name: (1 - t) * start_values[name] + t * end_values[name] for name in FEATURE_NAMES}


def timeline(
    start: FeatureVector,
    end: FeatureVector,
    disease_key: str,
    steps: int = DEFAULT_STEPS,
    registry: typing.Optional[DiseaseRegistry] = None,
) -> list[TimelinePoint]:
    """
    Score `steps` evenly spaced blends from `start` to `end`.
    The first point equals score(start) and the last equals score(end).
    """
    if isinstance(steps, bool) or not isinstance(steps, int):
        raise InvalidArgumentError(f"steps must be an integer, got {type(steps).__name__}")
    if steps < 2:
        raise InvalidArgumentError(f"steps must be at least 2, got {steps}")

    # resolve the model up front so an unknown key fails before any work
    model = get_model(disease_key, registry)
    start_values = derive(start)
    end_values = derive(end)

    points: list[TimelinePoint] = []
    for i in range(steps):
        t = i / (steps - 1)
        result = score_values(blend(start_values, end_values, t), model.key, registry)
        points.append(TimelinePoint(step=i, risk=result.probability))
    return points
