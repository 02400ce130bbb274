"""
Rule-based crop advice from the latest reading.

Three independent bands are evaluated in order (temperature, moisture, soil
type) and their advisories concatenated. A missing reading contributes
nothing; when both temperature and moisture are missing the temperature and
moisture bands are replaced by a single "insufficient data" advisory. The soil
overlay is applied whenever a soil type is chosen, data or not.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from data_model import Sample

INSUFFICIENT_DATA = "Insufficient data for recommendations"
NO_RECOMMENDATION = "--"
SEE_RECOMMENDATIONS = "See recommendations"


class SoilType(str, Enum):
    SANDY = "sandy"
    CLAY = "clay"
    LOAMY = "loamy"
    SILTY = "silty"
    UNSET = "unset"

    @classmethod
    def parse(cls, text: Optional[str]) -> "SoilType":
        """Map a stored/selected value to a SoilType; blanks mean unset."""
        if not text:
            return cls.UNSET
        return cls(text.strip().lower())


SOIL_ADVICE = {
    SoilType.SANDY: "Sandy soil crops: Carrots, Radishes, Potatoes",
    SoilType.CLAY: "Clay soil crops: Beans, Broccoli, Cabbage",
    SoilType.LOAMY: "Loamy soil crops: Most vegetables thrive",
    SoilType.SILTY: "Silty soil crops: Most vegetables, especially leafy greens",
}

_FIRST_CROP = re.compile(r": (.*?)(?:,|$)")


def temperature_advice(temperature: float) -> str:
    if temperature < 15:
        return "Cold-weather crops: Spinach, Kale, Cabbage"
    if temperature < 25:
        return "Moderate-temperature crops: Lettuce, Carrots, Potatoes"
    return "Warm-weather crops: Tomatoes, Peppers, Cucumbers"


def moisture_advice(moisture: float) -> str:
    if moisture < 30:
        return "Drought-resistant crops: Succulents, Cacti, Drought-resistant herbs"
    if moisture < 60:
        return "Moderate-water crops: Beans, Corn, Sunflowers"
    return "Water-loving crops: Rice, Watercress, Mint"


def recommend(sample: Optional[Sample], soil_type: SoilType = SoilType.UNSET) -> List[str]:
    temperature = sample.temperature if sample is not None else None
    moisture = sample.moisture if sample is not None else None

    advisories: List[str] = []
    if temperature is None and moisture is None:
        advisories.append(INSUFFICIENT_DATA)
    else:
        if temperature is not None:
            advisories.append(temperature_advice(temperature))
        if moisture is not None:
            advisories.append(moisture_advice(moisture))

    soil = SOIL_ADVICE.get(SoilType(soil_type))
    if soil is not None:
        advisories.append(soil)
    return advisories


def highlight_crop(advisories: List[str]) -> str:
    """
    First crop named in the first advisory, for the overview card.

    Only the first advisory is looked at: with insufficient data it has no crop,
    so the card reads "See recommendations" even when a soil overlay follows.
    """
    if not advisories:
        return NO_RECOMMENDATION
    match = _FIRST_CROP.search(advisories[0])
    if match and match.group(1):
        return match.group(1)
    return SEE_RECOMMENDATIONS
