
from pydantic import BaseModel

class ExtractResponse(BaseModel):
    markdown: str
    rows: list[list[str]]
    column_count: int = 0
    warnings: list[str] = []  # Non-fatal findings from the table validator
    model: str | None = None


class PreviewResponse(BaseModel):
    header: list[str] = []
    rows: list[list[str]] = []
    row_count: int = 0  # Header included
