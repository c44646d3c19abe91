"""Nutrition label domain models."""

from dataclasses import dataclass

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class ServingInfo:
    """Serving section of a nutrition facts label."""

    servings_per_container: str = NOT_AVAILABLE
    serving_size: str = NOT_AVAILABLE
    calories: str = NOT_AVAILABLE


@dataclass(frozen=True)
class Macronutrients:
    """Macronutrient section of a nutrition facts label."""

    total_fat: str = NOT_AVAILABLE
    saturated_fat: str = NOT_AVAILABLE
    trans_fat: str = NOT_AVAILABLE
    cholesterol: str = NOT_AVAILABLE
    sodium: str = NOT_AVAILABLE
    total_carbohydrate: str = NOT_AVAILABLE
    dietary_fiber: str = NOT_AVAILABLE
    total_sugars: str = NOT_AVAILABLE
    added_sugars: str = NOT_AVAILABLE
    protein: str = NOT_AVAILABLE


@dataclass(frozen=True)
class VitaminsAndMinerals:
    """Vitamin and mineral section of a nutrition facts label."""

    vitamin_d: str = NOT_AVAILABLE
    calcium: str = NOT_AVAILABLE
    iron: str = NOT_AVAILABLE
    potassium: str = NOT_AVAILABLE


@dataclass(frozen=True)
class NutritionRecord:
    """Structured nutrition facts parsed from one OCR pass."""

    serving_info: ServingInfo
    macronutrients: Macronutrients
    vitamins_and_minerals: VitaminsAndMinerals

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Return the record keyed by the camelCase label field names."""
        serving = self.serving_info
        macros = self.macronutrients
        vitamins = self.vitamins_and_minerals
        return {
            "servingInfo": {
                "servingsPerContainer": serving.servings_per_container,
                "servingSize": serving.serving_size,
                "calories": serving.calories,
            },
            "macronutrients": {
                "totalFat": macros.total_fat,
                "saturatedFat": macros.saturated_fat,
                "transFat": macros.trans_fat,
                "cholesterol": macros.cholesterol,
                "sodium": macros.sodium,
                "totalCarbohydrate": macros.total_carbohydrate,
                "dietaryFiber": macros.dietary_fiber,
                "totalSugars": macros.total_sugars,
                "addedSugars": macros.added_sugars,
                "protein": macros.protein,
            },
            "vitaminsAndMinerals": {
                "vitaminD": vitamins.vitamin_d,
                "calcium": vitamins.calcium,
                "iron": vitamins.iron,
                "potassium": vitamins.potassium,
            },
        }


@dataclass(frozen=True)
class LabelAnalysis:
    """Result of reading one nutrition label."""

    raw_text: str
    record: NutritionRecord
    report: str
