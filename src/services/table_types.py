import base64
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import List


# One parsed pipe-table line: trimmed cell strings in column order
TableRow = List[str]


@dataclass(frozen=True)
class ImageInput:
    """An in-memory image payload plus its media type.

    Created when a file is selected, consumed once per extraction call,
    never persisted.
    """

    data: bytes
    mime_type: str
    filename: str | None = None

    @classmethod
    def from_data_uri(cls, uri: str, mime_type: str | None = None, filename: str | None = None) -> "ImageInput":
        """
        Build an ImageInput from a base64 data URI or a bare base64 string.

        "data:image/png;base64,iVBOR..." keeps everything after the first comma;
        a string without a comma is taken as the payload itself.
        """
        header, sep, payload = uri.partition(",")
        if not sep or not payload:
            payload = uri
            header = ""

        if mime_type is None:
            mime_type = "application/octet-stream"
            if header.startswith("data:"):
                mime_type = header[len("data:"):].split(";", 1)[0] or mime_type

        return cls(data=base64.b64decode(payload, validate=True), mime_type=mime_type, filename=filename)

    def base64_payload(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def size(self) -> int:
        return len(self.data)


def today() -> str:
    """Today's UTC date as YYYY-MM-DD"""
    return datetime.now(UTC).date().isoformat()


@dataclass
class ExtractionRequest:
    images: List[ImageInput]
    context_date: str = field(default_factory=today)
