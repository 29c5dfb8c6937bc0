import pytest

from HDP.disease import (
    DEFAULT_REGISTRY,
    DiseaseModel,
    DiseaseRegistry,
    HEART,
    get_model,
)
from HDP.errors import InvalidArgumentError, UnknownDiseaseError
from HDP.features import FEATURE_NAMES
from HDP.scorer import score


def _flat_weights(value: float) -> dict[str, float]:
    return {name: value for name in FEATURE_NAMES}


@pytest.mark.parametrize("key,label", [("heart", "Heart Disease"), ("diabetes", "Type-2 Diabetes"), ("stroke", "Stroke")])
def test_get_model_supported_diseases(key, label):
    model = get_model(key)
    assert model.key == key
    assert model.label == label


@pytest.mark.parametrize("bad_key", ["flu", "Heart", "", " heart", None, ["heart"]])
def test_get_model_unknown_key_raises(bad_key):
    """Only the exact registry keys are accepted."""
    with pytest.raises(UnknownDiseaseError):
        get_model(bad_key)


def test_unknown_disease_message_lists_options():
    with pytest.raises(UnknownDiseaseError, match="Options"):
        get_model("flu")


def test_weight_key_sets_are_identical_across_models():
    for model in DEFAULT_REGISTRY:
        assert tuple(model.weights) == FEATURE_NAMES


def test_heart_weights_match_reference():
    assert HEART.bias == -4.7
    assert HEART.weights["sex_is_male"] == 0.12
    assert HEART.weights["smoker"] == 0.28
    assert HEART.weights["exercise"] == -0.05
    assert HEART.weights["family_hx"] == 0.32


def test_model_weights_are_read_only():
    with pytest.raises(TypeError):
        HEART.weights["age"] = 1.0


def test_model_with_incomplete_weights_raises():
    weights = _flat_weights(0.1)
    del weights["stress"]
    with pytest.raises(InvalidArgumentError, match="stress"):
        DiseaseModel(key="partial", label="Partial", bias=0.0, weights=weights)


def test_model_with_unknown_weight_raises():
    with pytest.raises(InvalidArgumentError):
        DiseaseModel(key="extra", label="Extra", bias=0.0, weights=dict(_flat_weights(0.1), height=0.2))


def test_model_with_non_finite_weight_raises():
    with pytest.raises(InvalidArgumentError):
        DiseaseModel(key="nan", label="NaN", bias=0.0, weights=dict(_flat_weights(0.1), age=float("nan")))


@pytest.mark.parametrize("bad_number", ["0.1", None, True])
def test_model_with_non_numeric_weight_or_bias_raises(bad_number):
    with pytest.raises(InvalidArgumentError, match="finite number"):
        DiseaseModel(key="text", label="Text", bias=0.0, weights=dict(_flat_weights(0.1), age=bad_number))
    with pytest.raises(InvalidArgumentError, match="bias"):
        DiseaseModel(key="text", label="Text", bias=bad_number, weights=_flat_weights(0.1))


def test_model_with_non_mapping_weights_raises():
    with pytest.raises(InvalidArgumentError, match="mapping"):
        DiseaseModel(key="list", label="List", bias=0.0, weights=[0.1] * 12)


def test_models_are_hashable():
    same = DiseaseModel(key=HEART.key, label=HEART.label, bias=HEART.bias, weights=dict(HEART.weights))
    assert hash(same) == hash(HEART)
    assert same == HEART
    assert len({HEART, same}) == 1


def test_model_weights_are_copied():
    weights = _flat_weights(0.1)
    model = DiseaseModel(key="copy", label="Copy", bias=0.0, weights=weights)
    weights["age"] = 99.0
    assert model.weights["age"] == 0.1


def test_default_registry_contents():
    assert DEFAULT_REGISTRY.keys() == ("heart", "diabetes", "stroke")
    assert len(DEFAULT_REGISTRY) == 3
    assert "heart" in DEFAULT_REGISTRY
    assert "flu" not in DEFAULT_REGISTRY
    assert ["heart"] not in DEFAULT_REGISTRY


def test_registry_rejects_duplicate_keys():
    with pytest.raises(InvalidArgumentError):
        DiseaseRegistry([HEART, HEART])


def test_custom_registry_extends_the_disease_set(default_features):
    """A new disease is just another complete DiseaseModel entry."""
    neutral = DiseaseModel(key="neutral", label="Neutral", bias=0.0, weights=_flat_weights(0.0))
    registry = DiseaseRegistry([HEART, neutral])

    assert score(default_features, "neutral", registry=registry) == 0.5
    assert score(default_features, "heart", registry=registry) == score(default_features, "heart")
    with pytest.raises(UnknownDiseaseError):
        score(default_features, "stroke", registry=registry)
