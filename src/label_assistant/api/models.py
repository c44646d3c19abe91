"""Request and response models for the HTTP API."""

from pydantic import BaseModel

from label_assistant.domain.labels import LabelAnalysis


class LabelTextRequest(BaseModel):
    """Text that the client already recognized from a label."""

    text: str


class ChatRequest(BaseModel):
    """Question about a previously read label."""

    nutrition_text: str
    question: str


class UsageRequest(BaseModel):
    """Raw usage counter bump; ``type`` is ``image`` or ``chat``."""

    type: str


class LabelResponse(BaseModel):
    """Parsed label with its Markdown report."""

    raw_text: str
    record: dict[str, dict[str, str]]
    report: str

    @classmethod
    def from_analysis(cls, analysis: LabelAnalysis) -> "LabelResponse":
        return cls(
            raw_text=analysis.raw_text,
            record=analysis.record.to_dict(),
            report=analysis.report,
        )
