"""
Risk scorer.

Applies a disease model to a feature vector:

    z = bias + sum(weight_i * value_i)     over the derived features, in canonical order
    p = 1 / (1 + exp(-z))
    p = clamp(p, 0, 1)

The clamp cannot change a finite logistic output; it exists so that a NaN
never escapes as a "probability" (it is rejected instead).
All functions here are pure and safe to call concurrently.
"""

import math
import typing
from dataclasses import dataclass

from .disease import DiseaseModel, DiseaseRegistry, get_model
from .errors import InvalidArgumentError
from .features import FEATURE_NAMES, FeatureVector, derive, validate_values


@dataclass(frozen=True)
class RiskResult:
    """
    Output of one scoring call.

    Attributes:
        disease_key: The disease model that was applied.
        probability: Logistic output in [0, 1]; a probability-like score, not calibrated.
        z: The raw linear combination before the logistic transform.
    """

    disease_key: str
    probability: float
    z: float

    @property
    def percent(self) -> int:
        """Whole-percent rendering of the probability (half rounds up)."""
        return round_half_up(self.probability * 100)


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; displayed percentages round .5 up
    return int(math.floor(value + 0.5))


def sigmoid(z: float) -> float:
    try:
        return 1.0 / (1.0 + math.exp(-z))
    except OverflowError:
        # exp(-z) overflows only for z < -709; the true value is below the smallest double
        return 0.0


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    if math.isnan(value):
        raise InvalidArgumentError("Risk score is not a number")
    return max(lower, min(upper, value))


def feature_terms(values: typing.Mapping[str, float], model: DiseaseModel) -> dict[str, float]:
    """
    Per-feature products weight_i * value_i, in canonical order.
    Shared by the scorer and the importance decomposer so both see the same terms.
    """
    return {name: model.weights[name] * values[name] for name in FEATURE_NAMES}


def linear_predictor(values: typing.Mapping[str, float], model: DiseaseModel) -> float:
    z = model.bias
    for term in feature_terms(values, model).values():
        z += term
    return z


def _score(values: typing.Mapping[str, float], model: DiseaseModel) -> RiskResult:
    z = linear_predictor(values, model)
    return RiskResult(disease_key=model.key, probability=clamp(sigmoid(z)), z=z)


def score_values(
    values: typing.Mapping[str, float],
    disease_key: str,
    registry: typing.Optional[DiseaseRegistry] = None,
) -> RiskResult:
    """
    Score an already-derived value mapping (see features.derive).
    Values may be fractional, e.g. the blended 0..1 booleans of a timeline step.
    """
    model = get_model(disease_key, registry)
    return _score(validate_values(values), model)


def assess(
    features: FeatureVector,
    disease_key: str,
    registry: typing.Optional[DiseaseRegistry] = None,
) -> RiskResult:
    """Score a scenario, keeping the raw linear score alongside the probability."""
    model = get_model(disease_key, registry)
    return _score(derive(features), model)


def score(
    features: FeatureVector,
    disease_key: str,
    registry: typing.Optional[DiseaseRegistry] = None,
) -> float:
    """Risk probability in [0, 1] of `features` under the given disease model."""
    return assess(features, disease_key, registry).probability
