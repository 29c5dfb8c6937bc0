"""
Built-in scenarios.

DEFAULT_FEATURES is the starting scenario A, DEFAULT_TARGET the starting
scenario B (a few lifestyle improvements on top of A). PRESETS holds the
named example profiles.
"""

from .errors import NotFoundError
from .features import FeatureVector, Sex

DEFAULT_FEATURES = FeatureVector(
    age=28,
    sex=Sex.MALE,
    bmi=24,
    systolic=118,
    diastolic=76,
    cholesterol=170,
    glucose=92,
    smoker=False,
    exercise=3,
    sleep=7,
    family_hx=False,
    stress=3,
)

DEFAULT_TARGET = DEFAULT_FEATURES.replace(exercise=5, sleep=7.5, smoker=False, stress=2)

PRESETS: dict[str, FeatureVector] = {
    "Athlete": FeatureVector(
        age=26, sex=Sex.MALE, bmi=22, systolic=112, diastolic=70, cholesterol=155,
        glucose=88, smoker=False, exercise=7, sleep=8, family_hx=False, stress=2,
    ),
    "Office": FeatureVector(
        age=30, sex=Sex.FEMALE, bmi=26, systolic=120, diastolic=78, cholesterol=175,
        glucose=95, smoker=False, exercise=2, sleep=7, family_hx=False, stress=5,
    ),
    "Smoker": FeatureVector(
        age=35, sex=Sex.MALE, bmi=27, systolic=126, diastolic=82, cholesterol=190,
        glucose=98, smoker=True, exercise=1, sleep=6.5, family_hx=True, stress=6,
    ),
    "Diabetic": FeatureVector(
        age=45, sex=Sex.FEMALE, bmi=30, systolic=130, diastolic=85, cholesterol=200,
        glucose=130, smoker=False, exercise=1.5, sleep=7, family_hx=True, stress=5,
    ),
}


def preset_names() -> list[str]:
    return list(PRESETS)


def get_preset(name: str) -> FeatureVector:
    """Case-insensitive preset lookup; raises NotFoundError for unknown names."""
    key = str(name).strip().casefold()
    for preset_name, features in PRESETS.items():
        if preset_name.casefold() == key:
            return features
    raise NotFoundError(name, kind="preset")
