import pytest

from HDP.disease import DEFAULT_REGISTRY, get_model
from HDP.errors import UnknownDiseaseError
from HDP.features import FEATURE_NAMES
from HDP.importance import ImportanceEntry, importance, rank_importance
from HDP.scorer import assess

DISEASE_KEYS = list(DEFAULT_REGISTRY.keys())


def test_default_heart_shares(default_features):
    """Hand-computed shares for the default scenario under 'heart' (total |raw| = 11.704)."""
    entries = importance(default_features, "heart")
    assert [e.share_percent for e in entries] == [6, 1, 12, 18, 6, 36, 16, 0, 1, 1, 0, 2]
    assert [e.label for e in entries] == [
        "Age", "Male", "BMI", "Systolic", "Diastolic", "Chol",
        "Glucose", "Smoker", "Exercise", "Sleep", "FamHx", "Stress",
    ]


@pytest.mark.parametrize(
    "disease_key,expected_sum",
    [("heart", 99), ("diabetes", 101), ("stroke", 100)],
)
def test_default_shares_sum_to_about_100(default_features, disease_key, expected_sum):
    """Per-entry rounding may drift the total by one point."""
    entries = importance(default_features, disease_key)
    total = sum(e.share_percent for e in entries)
    assert total == expected_sum
    assert abs(total - 100) <= 1


def test_rounding_drift_can_exceed_one_point(default_features):
    """Plausible whole-number inputs whose shares add up to 104 (total |raw| = 18.604)."""
    features = default_features.replace(
        age=19, bmi=36, systolic=173, diastolic=94, cholesterol=251, glucose=200,
        smoker=True, exercise=10, sleep=6, family_hx=True, stress=5,
    )
    entries = importance(features, "heart")
    assert [e.share_percent for e in entries] == [3, 1, 12, 17, 5, 34, 22, 2, 3, 1, 2, 2]
    assert sum(e.share_percent for e in entries) == 104


@pytest.mark.parametrize("disease_key", DISEASE_KEYS)
def test_importance_shape_and_bounds(random_scenarios, disease_key):
    for features in random_scenarios:
        entries = importance(features, disease_key)
        assert len(entries) == 12
        assert tuple(e.feature for e in entries) == FEATURE_NAMES
        assert all(0 <= e.share_percent <= 100 for e in entries)

        # each share is off by at most half a point, so the drift is bounded
        nonzero = sum(1 for e in entries if e.raw_contribution != 0)
        assert abs(sum(e.share_percent for e in entries) - 100) <= nonzero / 2


def test_raw_contributions_are_signed_terms(default_features):
    entries = {e.feature: e for e in importance(default_features, "heart")}
    assert entries["cholesterol"].raw_contribution == pytest.approx(4.25)
    assert entries["exercise"].raw_contribution == pytest.approx(-0.15)
    assert entries["sleep"].raw_contribution == pytest.approx(-0.14)
    assert entries["smoker"].raw_contribution == 0.0


@pytest.mark.parametrize("disease_key", DISEASE_KEYS)
def test_contributions_and_bias_add_up_to_score(default_features, disease_key):
    entries = importance(default_features, disease_key)
    z = get_model(disease_key).bias + sum(e.raw_contribution for e in entries)
    assert z == pytest.approx(assess(default_features, disease_key).z)


def test_all_zero_contributions_give_zero_shares(zero_features):
    entries = importance(zero_features, "heart")
    assert len(entries) == 12
    assert all(e.share_percent == 0 for e in entries)
    assert all(e.raw_contribution == 0 for e in entries)


def test_order_is_fixed_regardless_of_values(default_features):
    heavy_smoker = default_features.replace(smoker=True, cholesterol=0)
    assert [e.feature for e in importance(heavy_smoker, "heart")] == list(FEATURE_NAMES)


def test_rank_importance_sorts_by_magnitude(default_features):
    entries = importance(default_features, "heart")
    ranked = rank_importance(entries)
    assert [e.feature for e in ranked[:4]] == ["cholesterol", "systolic", "glucose", "bmi"]
    # ties (both zero) keep their canonical order
    assert [e.feature for e in ranked[-2:]] == ["smoker", "family_hx"]
    # the input list is not reordered
    assert [e.feature for e in entries] == list(FEATURE_NAMES)


def test_importance_unknown_disease_raises(default_features):
    with pytest.raises(UnknownDiseaseError):
        importance(default_features, "flu")


def test_importance_entry_to_dict():
    entry = ImportanceEntry(feature="bmi", label="BMI", raw_contribution=1.44, share_percent=12)
    assert entry.to_dict() == {"feature": "bmi", "label": "BMI", "raw_contribution": 1.44, "share_percent": 12}
