"""Usage counter models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UsageKind(str, Enum):
    """Kinds of tracked interactions."""

    IMAGE = "image"
    CHAT = "chat"


class UsageCounts(BaseModel):
    """Totals of image uploads and chat interactions."""

    model_config = ConfigDict(populate_by_name=True)

    image_uploads: int = Field(default=0, ge=0, alias="imageUploads")
    chat_interactions: int = Field(default=0, ge=0, alias="chatInteractions")

    def incremented(self, kind: UsageKind) -> "UsageCounts":
        """Return a copy with the counter for ``kind`` bumped by one."""
        if kind is UsageKind.IMAGE:
            return self.model_copy(update={"image_uploads": self.image_uploads + 1})
        return self.model_copy(
            update={"chat_interactions": self.chat_interactions + 1}
        )
