
from pydantic import BaseModel, Field

class MarkdownPayload(BaseModel):
    markdown: str = Field(default="", description="Raw pipe-table text as returned by the model")


class DataUriImage(BaseModel):
    data_uri: str = Field(..., description="data:image/...;base64,... or a bare base64 payload")
    mime_type: str | None = None  # Required when data_uri is bare base64
    filename: str | None = None


class DataUriUpload(BaseModel):
    images: list[DataUriImage]
