"""
Feature vector domain model.

Defines the FeatureVector dataclass holding one scenario's inputs, the Sex
enumeration, and the canonical ordered list of derived features that the
risk scorer and the importance decomposer both read from.

Interchange format
------------------
Profiles are persisted as a flat mapping of twelve names:

    age, sex, bmi, systolic, diastolic, cholesterol, glucose,
    smoker, exercise, sleep, familyHx, stress

`familyHx` is the only name that differs from the dataclass attribute
(`family_hx`); FIELD_ALIASES maps between the two.
"""

from __future__ import annotations

import dataclasses
import math
import numbers
import typing
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidArgumentError

# Interchange names that differ from the dataclass attribute
FIELD_ALIASES = {"familyHx": "family_hx"}
RECORD_FIELD_NAMES = {attribute: record for record, attribute in FIELD_ALIASES.items()}

_NUMERIC_FIELDS = (
    "age",
    "bmi",
    "systolic",
    "diastolic",
    "cholesterol",
    "glucose",
    "exercise",
    "sleep",
)
_NON_NEGATIVE_FIELDS = {"age", "exercise"}
_BOOLEAN_FIELDS = ("smoker", "family_hx")
STRESS_MIN, STRESS_MAX = 0, 10

_TRUE_STRINGS = {"1", "true", "t", "yes", "y"}
_FALSE_STRINGS = {"0", "false", "f", "no", "n"}


class Sex(Enum):
    """
    Biological sex as used by the disease models.
    Only "male" contributes to scoring (as the derived `sex_is_male` feature).
    """
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def from_label(cls, label: typing.Any) -> "Sex":
        """
        Convert a human-readable label ("male", "Female", "M", ...) into the enum.
        """
        if isinstance(label, Sex):
            return label
        key = str(label).strip().lower()
        mapping = {
            "male": cls.MALE,
            "m": cls.MALE,
            "female": cls.FEMALE,
            "f": cls.FEMALE,
        }
        try:
            return mapping[key]
        except KeyError:
            raise InvalidArgumentError(f"Unknown sex label: {label!r}")


@dataclass(frozen=True)
class FeatureVector:
    """
    One scenario's full set of health and lifestyle inputs.

    Attributes:
        age: Age in years (non-negative).
        sex: Sex.MALE or Sex.FEMALE ("male"/"female" strings are accepted).
        bmi: Body-mass index.
        systolic: Systolic blood pressure in mmHg.
        diastolic: Diastolic blood pressure in mmHg.
        cholesterol: Total cholesterol in mg/dL.
        glucose: Fasting glucose in mg/dL.
        smoker: True for a current smoker.
        exercise: Exercise in hours per week (non-negative).
        sleep: Sleep in hours per night.
        family_hx: True if there is a family history of the disease.
        stress: Self-reported stress level, integer 0-10.

    Instances are immutable; use `replace()` to derive a changed scenario.
    """

    age: float
    sex: Sex
    bmi: float
    systolic: float
    diastolic: float
    cholesterol: float
    glucose: float
    smoker: bool
    exercise: float
    sleep: float
    family_hx: bool
    stress: int

    def __post_init__(self) -> None:
        # Normalize sex labels to the enum
        if isinstance(self.sex, str):
            object.__setattr__(self, "sex", Sex.from_label(self.sex))
        elif not isinstance(self.sex, Sex):
            raise InvalidArgumentError(
                f"sex must be 'male' or 'female', got {type(self.sex).__name__}"
            )

        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidArgumentError(
                    f"{name} must be a number, got {type(value).__name__}"
                )
            if not math.isfinite(value):
                raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
            if name in _NON_NEGATIVE_FIELDS and value < 0:
                raise InvalidArgumentError(f"{name} must be non-negative, got {value!r}")

        for name in _BOOLEAN_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidArgumentError(
                    f"{name} must be a boolean, got {type(value).__name__}"
                )

        if isinstance(self.stress, bool) or not isinstance(self.stress, numbers.Integral):
            raise InvalidArgumentError(
                f"stress must be an integer, got {type(self.stress).__name__}"
            )
        if not STRESS_MIN <= self.stress <= STRESS_MAX:
            raise InvalidArgumentError(
                f"stress must be between {STRESS_MIN} and {STRESS_MAX}, got {self.stress!r}"
            )

    def replace(self, **changes: typing.Any) -> "FeatureVector":
        """
        Return a copy with the given fields changed; the copy is re-validated.
        Interchange names (e.g. `familyHx`) are accepted as keyword names.
        """
        normalized = {FIELD_ALIASES.get(name, name): value for name, value in changes.items()}
        unknown = sorted(set(normalized) - set(field_names()))
        if unknown:
            raise InvalidArgumentError(f"Unknown feature fields: {unknown}")
        return dataclasses.replace(self, **normalized)

    def to_dict(self) -> dict[str, typing.Any]:
        """Serialize to the flat interchange mapping."""
        record: dict[str, typing.Any] = {}
        for name in field_names():
            value = getattr(self, name)
            if isinstance(value, Sex):
                value = value.value
            record[RECORD_FIELD_NAMES.get(name, name)] = value
        return record

    @classmethod
    def from_dict(cls, record: typing.Mapping[str, typing.Any]) -> "FeatureVector":
        """
        Build a FeatureVector from an interchange mapping.

        Numeric strings are converted, booleans are parsed from the usual
        yes/no spellings, and integral floats are accepted for `stress`.
        Missing or unknown fields raise InvalidArgumentError.
        """
        if not isinstance(record, typing.Mapping):
            raise InvalidArgumentError(f"Profile record must be a mapping, got {type(record).__name__}")
        normalized = {FIELD_ALIASES.get(str(key), str(key)): value for key, value in record.items()}
        expected = set(field_names())
        missing = sorted(expected - set(normalized))
        if missing:
            raise InvalidArgumentError(f"Missing feature fields: {missing}")
        unknown = sorted(set(normalized) - expected)
        if unknown:
            raise InvalidArgumentError(f"Unknown feature fields: {unknown}")

        values: dict[str, typing.Any] = {"sex": Sex.from_label(normalized["sex"])}
        for name in _NUMERIC_FIELDS:
            values[name] = _to_number(name, normalized[name])
        for name in _BOOLEAN_FIELDS:
            values[name] = _to_bool(name, normalized[name])
        values["stress"] = _to_stress(normalized["stress"])
        return cls(**values)


def field_names() -> tuple[str, ...]:
    """Dataclass attribute names of FeatureVector, in declaration order."""
    return tuple(f.name for f in dataclasses.fields(FeatureVector))


def _to_number(name: str, value: typing.Any) -> float:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a number, got bool")
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    return number


def _to_bool(name: str, value: typing.Any) -> bool:
    """
    Boolean parsing for interchange records:
    - True for: True, 1, '1', 'true', 't', 'yes', 'y' (case-insensitive)
    - False for: False, 0, '0', 'false', 'f', 'no', 'n'
    - anything else is rejected
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Real) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise InvalidArgumentError(f"{name} must be a boolean, got {value!r}")


def _to_stress(value: typing.Any) -> int:
    number = _to_number("stress", value)
    if not number.is_integer():
        raise InvalidArgumentError(f"stress must be an integer, got {value!r}")
    return int(number)


# ----------------
# Derived features
# ----------------


@dataclass(frozen=True)
class DerivedFeature:
    """
    A numeric input of the linear disease models.

    Attributes:
        name: Key used in DiseaseModel.weights.
        label: Short display label.
        extract: Maps a FeatureVector to the feature's value
            (booleans become 1.0/0.0, sex becomes 1.0 when male).
    """

    name: str
    label: str
    extract: typing.Callable[[FeatureVector], float]


DERIVED_FEATURES: tuple[DerivedFeature, ...] = (
    DerivedFeature("age", "Age", lambda f: float(f.age)),
    DerivedFeature("sex_is_male", "Male", lambda f: 1.0 if f.sex is Sex.MALE else 0.0),
    DerivedFeature("bmi", "BMI", lambda f: float(f.bmi)),
    DerivedFeature("systolic", "Systolic", lambda f: float(f.systolic)),
    DerivedFeature("diastolic", "Diastolic", lambda f: float(f.diastolic)),
    DerivedFeature("cholesterol", "Chol", lambda f: float(f.cholesterol)),
    DerivedFeature("glucose", "Glucose", lambda f: float(f.glucose)),
    DerivedFeature("smoker", "Smoker", lambda f: 1.0 if f.smoker else 0.0),
    DerivedFeature("exercise", "Exercise", lambda f: float(f.exercise)),
    DerivedFeature("sleep", "Sleep", lambda f: float(f.sleep)),
    DerivedFeature("family_hx", "FamHx", lambda f: 1.0 if f.family_hx else 0.0),
    DerivedFeature("stress", "Stress", lambda f: float(f.stress)),
)

FEATURE_NAMES: tuple[str, ...] = tuple(feature.name for feature in DERIVED_FEATURES)
FEATURE_LABELS: dict[str, str] = {feature.name: feature.label for feature in DERIVED_FEATURES}


def derive(features: FeatureVector) -> dict[str, float]:
    """
    Extract the derived feature values of a scenario, in canonical order.
    """
    if not isinstance(features, FeatureVector):
        raise InvalidArgumentError(f"Expected a FeatureVector, got {type(features).__name__}")
    return validate_values({feature.name: feature.extract(features) for feature in DERIVED_FEATURES})


def validate_values(values: typing.Mapping[str, float]) -> dict[str, float]:
    """
    Check that a derived-value mapping covers exactly FEATURE_NAMES with finite
    numbers and return it re-ordered canonically.
    """
    missing = sorted(set(FEATURE_NAMES) - set(values))
    if missing:
        raise InvalidArgumentError(f"Missing derived features: {missing}")
    unknown = sorted(set(values) - set(FEATURE_NAMES))
    if unknown:
        raise InvalidArgumentError(f"Unknown derived features: {unknown}")

    ordered: dict[str, float] = {}
    for name in FEATURE_NAMES:
        value = values[name]
        if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
            raise InvalidArgumentError(f"Derived feature {name!r} must be a finite number, got {value!r}")
        ordered[name] = float(value)
    return ordered
