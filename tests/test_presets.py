import pytest

from HDP.errors import NotFoundError
from HDP.features import Sex
from HDP.presets import DEFAULT_FEATURES, DEFAULT_TARGET, PRESETS, get_preset, preset_names


def test_default_features_values():
    assert DEFAULT_FEATURES.to_dict() == {
        "age": 28,
        "sex": "male",
        "bmi": 24,
        "systolic": 118,
        "diastolic": 76,
        "cholesterol": 170,
        "glucose": 92,
        "smoker": False,
        "exercise": 3,
        "sleep": 7,
        "familyHx": False,
        "stress": 3,
    }


def test_default_target_only_changes_lifestyle():
    assert DEFAULT_TARGET == DEFAULT_FEATURES.replace(exercise=5, sleep=7.5, stress=2)


def test_preset_names():
    assert preset_names() == ["Athlete", "Office", "Smoker", "Diabetic"]


@pytest.mark.parametrize("name", ["Smoker", "smoker", " SMOKER "])
def test_get_preset_is_case_insensitive(name):
    assert get_preset(name) is PRESETS["Smoker"]


def test_preset_values():
    smoker = get_preset("Smoker")
    assert smoker.smoker is True
    assert smoker.family_hx is True
    assert smoker.sleep == 6.5

    diabetic = get_preset("Diabetic")
    assert diabetic.sex is Sex.FEMALE
    assert diabetic.glucose == 130
    assert diabetic.exercise == 1.5


def test_unknown_preset_raises():
    with pytest.raises(NotFoundError, match="preset"):
        get_preset("Astronaut")
