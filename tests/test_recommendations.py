from datetime import datetime

import pytest

from data_model import Sample
from services.recommendations import (INSUFFICIENT_DATA, NO_RECOMMENDATION, SEE_RECOMMENDATIONS,
                                      SoilType, highlight_crop, recommend)

T0 = datetime(2024, 5, 1, 12, 0, 0)


def sample(**kw):
    return Sample(T0, **kw)


def test_moderate_reading_on_loamy_soil():
    assert recommend(sample(temperature=20, moisture=45), SoilType.LOAMY) == [
        "Moderate-temperature crops: Lettuce, Carrots, Potatoes",
        "Moderate-water crops: Beans, Corn, Sunflowers",
        "Loamy soil crops: Most vegetables thrive",
    ]


def test_result_is_deterministic():
    s = sample(temperature=20, moisture=45)
    assert recommend(s, SoilType.LOAMY) == recommend(s, SoilType.LOAMY)


def test_insufficient_data_still_gets_soil_overlay():
    assert recommend(sample(), SoilType.SANDY) == [
        INSUFFICIENT_DATA,
        "Sandy soil crops: Carrots, Radishes, Potatoes",
    ]


def test_insufficient_data_without_soil_type():
    assert recommend(sample(), SoilType.UNSET) == [INSUFFICIENT_DATA]
    assert recommend(None) == [INSUFFICIENT_DATA]


@pytest.mark.parametrize("temperature, prefix", [
    (14.999, "Cold-weather"),
    (15.0, "Moderate-temperature"),
    (24.999, "Moderate-temperature"),
    (25.0, "Warm-weather"),
    (-5.0, "Cold-weather"),
])
def test_temperature_band_boundaries(temperature, prefix):
    assert recommend(sample(temperature=temperature))[0].startswith(prefix)


@pytest.mark.parametrize("moisture, prefix", [
    (29.9, "Drought-resistant"),
    (30.0, "Moderate-water"),
    (59.9, "Moderate-water"),
    (60.0, "Water-loving"),
])
def test_moisture_band_boundaries(moisture, prefix):
    assert recommend(sample(moisture=moisture))[0].startswith(prefix)


def test_zero_is_a_reading_not_missing():
    assert recommend(sample(temperature=0.0, moisture=0.0)) == [
        "Cold-weather crops: Spinach, Kale, Cabbage",
        "Drought-resistant crops: Succulents, Cacti, Drought-resistant herbs",
    ]


def test_only_moisture_present_skips_temperature_band():
    assert recommend(sample(moisture=70.0), SoilType.CLAY) == [
        "Water-loving crops: Rice, Watercress, Mint",
        "Clay soil crops: Beans, Broccoli, Cabbage",
    ]


def test_silty_overlay():
    assert recommend(sample(temperature=30.0), SoilType.SILTY)[-1] == (
        "Silty soil crops: Most vegetables, especially leafy greens"
    )


def test_soil_type_accepts_plain_string():
    assert recommend(sample(temperature=30.0), "clay")[-1].startswith("Clay soil")


def test_highlight_takes_first_crop_of_first_advisory():
    advisories = recommend(sample(temperature=30.0, moisture=45.0))
    assert highlight_crop(advisories) == "Tomatoes"


def test_highlight_with_single_named_crop():
    assert highlight_crop(["Loamy soil crops: Most vegetables thrive"]) == "Most vegetables thrive"


def test_highlight_placeholders():
    assert highlight_crop([]) == NO_RECOMMENDATION
    assert highlight_crop([INSUFFICIENT_DATA]) == SEE_RECOMMENDATIONS


@pytest.mark.parametrize("text, expected", [
    (None, SoilType.UNSET),
    ("", SoilType.UNSET),
    ("Loamy", SoilType.LOAMY),
    (" sandy ", SoilType.SANDY),
])
def test_soil_type_parse(text, expected):
    assert SoilType.parse(text) is expected


def test_soil_type_parse_rejects_unknown():
    with pytest.raises(ValueError):
        SoilType.parse("peat")


def test_highlight_ignores_soil_overlay_when_data_is_missing():
    advisories = recommend(sample(), SoilType.SANDY)
    assert highlight_crop(advisories) == SEE_RECOMMENDATIONS
