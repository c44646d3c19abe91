"""Markdown rendering of nutrition records."""

from label_assistant.domain.labels import NutritionRecord

SUMMARY_HEADING = "## 📊 Nutrition Facts Summary"

SUGGESTED_TOPICS = (
    "Daily value percentages",
    "Specific nutrients",
    "Serving size information",
    "Caloric content",
    "Dietary considerations",
)

_CLOSING_PROMPT = (
    "💬 What would you like to know about these nutrition facts? "
    "You can ask about:"
)


def format_report(record: NutritionRecord) -> str:
    """Render a record as the fixed Markdown summary shown before the chat."""
    serving = record.serving_info
    macros = record.macronutrients
    vitamins = record.vitamins_and_minerals

    sections = [
        SUMMARY_HEADING,
        _table(
            "### 🍽️ Serving Information",
            "Category",
            [
                ("Servings Per Container", serving.servings_per_container),
                ("Serving Size", serving.serving_size),
                ("Calories", serving.calories),
            ],
        ),
        _table(
            "### 📈 Macronutrients",
            "Nutrient",
            [
                ("Total Fat", macros.total_fat),
                ("Saturated Fat", macros.saturated_fat),
                ("Trans Fat", macros.trans_fat),
                ("Cholesterol", macros.cholesterol),
                ("Sodium", macros.sodium),
                ("Total Carbohydrate", macros.total_carbohydrate),
                ("Dietary Fiber", macros.dietary_fiber),
                ("Total Sugars", macros.total_sugars),
                ("Added Sugars", macros.added_sugars),
                ("Protein", macros.protein),
            ],
        ),
        _table(
            "### 🧪 Vitamins and Minerals",
            "Nutrient",
            [
                ("Vitamin D", vitamins.vitamin_d),
                ("Calcium", vitamins.calcium),
                ("Iron", vitamins.iron),
                ("Potassium", vitamins.potassium),
            ],
        ),
        _closing(),
    ]
    return "\n\n".join(sections)


def _table(heading: str, label_column: str, rows: list[tuple[str, str]]) -> str:
    lines = [
        heading,
        f"| {label_column} | Amount |",
        "|----------|---------|",
    ]
    lines.extend(f"| {label} | {value} |" for label, value in rows)
    return "\n".join(lines)


def _closing() -> str:
    lines = ["---", _CLOSING_PROMPT]
    lines.extend(f"- {topic}" for topic in SUGGESTED_TOPICS)
    return "\n".join(lines)
