"""Regex extraction of nutrition facts from OCR text."""

import logging
import re

from label_assistant.domain.labels import (
    NOT_AVAILABLE,
    Macronutrients,
    NutritionRecord,
    ServingInfo,
    VitaminsAndMinerals,
)

_logger = logging.getLogger(__name__)

# Tesseract sometimes emits this token in front of the first label line.
_ARTIFACT_PREFIX = re.compile(r"^mgm")
_WHITESPACE = re.compile(r"\s+")

_GRAMS_WITH_PERCENT = r"([\d.]+g\s*[\d.]+%)"
_MILLIGRAMS_WITH_PERCENT = r"([\d.]+mg\s*[\d.]+%)"
_GRAMS = r"([\d.]+g)"

_SERVING_PATTERNS: dict[str, re.Pattern[str]] = {
    "servings_per_container": re.compile(r"Servings per container\s*(\d+)"),
    "serving_size": re.compile(r"Serving size\s*([\d/.]+\s*cup\s*\(\d+g\))"),
    "calories": re.compile(r"Calories\s*(\d+)"),
}

_MACRO_PATTERNS: dict[str, re.Pattern[str]] = {
    "total_fat": re.compile(r"Total Fat\s*" + _GRAMS_WITH_PERCENT),
    "saturated_fat": re.compile(r"Saturated Fat\s*" + _GRAMS_WITH_PERCENT),
    "trans_fat": re.compile(r"Trans Fat\s*" + _GRAMS),
    "cholesterol": re.compile(r"Cholesterol\s*" + _MILLIGRAMS_WITH_PERCENT),
    "sodium": re.compile(r"Sodium\s*" + _MILLIGRAMS_WITH_PERCENT),
    "total_carbohydrate": re.compile(r"Total Carbohydrate\s*" + _GRAMS_WITH_PERCENT),
    "dietary_fiber": re.compile(r"Dietary Fiber\s*" + _GRAMS_WITH_PERCENT),
    "total_sugars": re.compile(r"Total Sugars\s*" + _GRAMS),
    "added_sugars": re.compile(r"Added Sugars\s*" + _GRAMS_WITH_PERCENT),
    "protein": re.compile(r"Protein\s*" + _GRAMS),
}

_VITAMIN_PATTERNS: dict[str, re.Pattern[str]] = {
    "vitamin_d": re.compile(r"Vitamin D\s*([\d.]+mcg\s*[\d.]+%)"),
    "calcium": re.compile(r"Calcium\s*" + _MILLIGRAMS_WITH_PERCENT),
    "iron": re.compile(r"Iron\s*" + _MILLIGRAMS_WITH_PERCENT),
    "potassium": re.compile(r"Potassium\s*" + _MILLIGRAMS_WITH_PERCENT),
}

FIELD_COUNT = len(_SERVING_PATTERNS) + len(_MACRO_PATTERNS) + len(_VITAMIN_PATTERNS)


def normalize_text(raw_text: str) -> str:
    """Drop the OCR artifact prefix and flatten the text onto one line."""
    cleaned = _ARTIFACT_PREFIX.sub("", raw_text)
    return _WHITESPACE.sub(" ", cleaned).strip()


def extract(raw_text: str) -> NutritionRecord:
    """Parse OCR text into a nutrition record.

    Every pattern is searched independently against the normalized text and
    the first match wins. Fields whose value does not match the expected
    shape are set to ``"N/A"``; this function never raises.
    """
    text = normalize_text(raw_text)
    serving = _match_all(_SERVING_PATTERNS, text)
    macros = _match_all(_MACRO_PATTERNS, text)
    vitamins = _match_all(_VITAMIN_PATTERNS, text)

    matched = sum(
        value != NOT_AVAILABLE
        for values in (serving, macros, vitamins)
        for value in values.values()
    )
    _logger.debug("Label fields matched: %s/%s", matched, FIELD_COUNT)

    return NutritionRecord(
        serving_info=ServingInfo(**serving),
        macronutrients=Macronutrients(**macros),
        vitamins_and_minerals=VitaminsAndMinerals(**vitamins),
    )


def _match_all(patterns: dict[str, re.Pattern[str]], text: str) -> dict[str, str]:
    return {name: _first_match(pattern, text) for name, pattern in patterns.items()}


def _first_match(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    if match is None or not match.group(1):
        return NOT_AVAILABLE
    return match.group(1)
