"""OpenAI Responses API client for label transcription."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from label_assistant.services.ocr import (
    TRANSCRIPTION_PROMPT,
    OcrClient,
    OcrError,
    to_data_url,
)


@dataclass
class OpenAIVisionOcrClient(OcrClient):
    """OCR client backed by an OpenAI vision model."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAIVisionOcrClient":
        """Create an OpenAI vision OCR client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model)

    async def read_text(self, image_bytes: bytes) -> str:
        """Ask the model to transcribe the label text."""
        response = await self.client.responses.create(
            model=self.model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": TRANSCRIPTION_PROMPT},
                        {"type": "input_image", "image_url": to_data_url(image_bytes)},
                    ],
                }
            ],
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise OcrError("OpenAI returned an empty transcription")
        return output_text
