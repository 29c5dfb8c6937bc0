import random
import pytest

from HDP.features import FeatureVector, Sex
from HDP.presets import DEFAULT_FEATURES, DEFAULT_TARGET


@pytest.fixture
def default_features() -> FeatureVector:
    return DEFAULT_FEATURES


@pytest.fixture
def target_features() -> FeatureVector:
    return DEFAULT_TARGET


@pytest.fixture
def zero_features() -> FeatureVector:
    """A scenario whose every derived feature is 0."""
    return FeatureVector(
        age=0, sex=Sex.FEMALE, bmi=0, systolic=0, diastolic=0, cholesterol=0,
        glucose=0, smoker=False, exercise=0, sleep=0, family_hx=False, stress=0,
    )


@pytest.fixture(scope="session")
def random_scenarios() -> list[FeatureVector]:
    """
    Seeded, plausible-range scenarios for property checks,
    plus a few far outside the usual ranges.
    """
    rng = random.Random(20240517)
    scenarios = []
    for _ in range(250):
        scenarios.append(
            FeatureVector(
                age=rng.uniform(0, 100),
                sex=rng.choice([Sex.MALE, Sex.FEMALE]),
                bmi=rng.uniform(14, 40),
                systolic=rng.uniform(80, 200),
                diastolic=rng.uniform(50, 140),
                cholesterol=rng.uniform(100, 300),
                glucose=rng.uniform(70, 250),
                smoker=rng.random() < 0.5,
                exercise=rng.uniform(0, 14),
                sleep=rng.uniform(3, 10),
                family_hx=rng.random() < 0.5,
                stress=rng.randint(0, 10),
            )
        )
    for _ in range(50):
        scenarios.append(
            FeatureVector(
                age=rng.uniform(0, 1e6),
                sex=rng.choice([Sex.MALE, Sex.FEMALE]),
                bmi=rng.uniform(-1e5, 1e5),
                systolic=rng.uniform(-1e5, 1e5),
                diastolic=rng.uniform(-1e5, 1e5),
                cholesterol=rng.uniform(-1e5, 1e5),
                glucose=rng.uniform(-1e5, 1e5),
                smoker=rng.random() < 0.5,
                exercise=rng.uniform(0, 1e6),
                sleep=rng.uniform(-1e5, 1e5),
                family_hx=rng.random() < 0.5,
                stress=rng.randint(0, 10),
            )
        )
    return scenarios
