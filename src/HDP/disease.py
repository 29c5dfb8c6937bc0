"""
Disease model registry.

Each supported disease is a DiseaseModel record: a bias plus one weight per
derived feature. Scoring and importance are written once against this record,
so adding a disease means adding data, not code.

NOTE: the weights are fixed illustrative values, not a trained or calibrated
predictor.
"""

import math
import numbers
import typing
from dataclasses import dataclass, field
from types import MappingProxyType

from .errors import InvalidArgumentError, UnknownDiseaseError
from .features import FEATURE_NAMES


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class DiseaseModel:
    """
    Represents the linear scoring function of one disease.

    Attributes:
        key: Registry key (e.g. 'heart').
        label: Human-readable name (e.g. 'Heart Disease').
        bias: Intercept of the linear combination.
        weights: Coefficient per derived feature; must cover exactly FEATURE_NAMES.
    """

    key: str
    label: str
    bias: float
    weights: typing.Mapping[str, float] = field(hash=False)

    def __post_init__(self):
        if not isinstance(self.key, str) or not self.key:
            raise InvalidArgumentError(f"Invalid disease key: {self.key!r}")

        if not _is_number(self.bias) or not math.isfinite(self.bias):
            raise InvalidArgumentError(f"Disease {self.key!r}: bias must be a finite number, got {self.bias!r}")

        if not isinstance(self.weights, typing.Mapping):
            raise InvalidArgumentError(f"Disease {self.key!r}: weights must be a mapping of feature name to weight")

        missing = sorted(set(FEATURE_NAMES) - set(self.weights))
        unknown = sorted(set(self.weights) - set(FEATURE_NAMES))
        if missing or unknown:
            raise InvalidArgumentError(
                f"Disease {self.key!r}: weights must cover exactly the derived features "
                f"(missing: {missing}, unknown: {unknown})"
            )
        for name, weight in self.weights.items():
            if not _is_number(weight) or not math.isfinite(weight):
                raise InvalidArgumentError(f"Disease {self.key!r}: weight {name!r} must be a finite number, got {weight!r}")

        # Freeze a canonically ordered copy of the weights
        frozen = MappingProxyType({name: float(self.weights[name]) for name in FEATURE_NAMES})
        object.__setattr__(self, "weights", frozen)
        object.__setattr__(self, "bias", float(self.bias))


class DiseaseRegistry:
    """
    Read-only lookup of disease key -> DiseaseModel.
    Built once from a sequence of models; no mutation is exposed.
    """

    def __init__(self, models: typing.Iterable[DiseaseModel]):
        by_key: dict[str, DiseaseModel] = {}
        for model in models:
            if model.key in by_key:
                raise InvalidArgumentError(f"Duplicate disease key: {model.key!r}")
            by_key[model.key] = model
        self._models = MappingProxyType(by_key)

    def get_model(self, disease_key: str) -> DiseaseModel:
        try:
            return self._models[disease_key]
        except (KeyError, TypeError):
            # TypeError covers unhashable keys
            raise UnknownDiseaseError(disease_key, self.keys())

    def keys(self) -> tuple[str, ...]:
        return tuple(self._models)

    def __contains__(self, disease_key) -> bool:
        try:
            return disease_key in self._models
        except TypeError:
            return False

    def __iter__(self) -> typing.Iterator[DiseaseModel]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)


HEART = DiseaseModel(
    key="heart",
    label="Heart Disease",
    bias=-4.7,
    weights={
        "age": 0.025,
        "sex_is_male": 0.12,
        "bmi": 0.06,
        "systolic": 0.018,
        "diastolic": 0.01,
        "cholesterol": 0.025,
        "glucose": 0.02,
        "smoker": 0.28,
        "exercise": -0.05,
        "sleep": -0.02,
        "family_hx": 0.32,
        "stress": 0.06,
    },
)

DIABETES = DiseaseModel(
    key="diabetes",
    label="Type-2 Diabetes",
    bias=-5.4,
    weights={
        "age": 0.02,
        "sex_is_male": 0.05,
        "bmi": 0.09,
        "systolic": 0.012,
        "diastolic": 0.008,
        "cholesterol": 0.015,
        "glucose": 0.04,
        "smoker": 0.15,
        "exercise": -0.04,
        "sleep": -0.01,
        "family_hx": 0.35,
        "stress": 0.03,
    },
)

STROKE = DiseaseModel(
    key="stroke",
    label="Stroke",
    bias=-5.1,
    weights={
        "age": 0.03,
        "sex_is_male": 0.06,
        "bmi": 0.04,
        "systolic": 0.024,
        "diastolic": 0.012,
        "cholesterol": 0.02,
        "glucose": 0.02,
        "smoker": 0.22,
        "exercise": -0.03,
        "sleep": -0.015,
        "family_hx": 0.28,
        "stress": 0.05,
    },
)

DEFAULT_REGISTRY = DiseaseRegistry([HEART, DIABETES, STROKE])


def get_model(disease_key: str, registry: typing.Optional[DiseaseRegistry] = None) -> DiseaseModel:
    """
    Look up a disease model; raises UnknownDiseaseError for unregistered keys.
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    return registry.get_model(disease_key)
