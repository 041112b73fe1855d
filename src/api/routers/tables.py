from fastapi import APIRouter, UploadFile, File, Form, HTTPException
from fastapi.responses import HTMLResponse, Response
from loguru import logger
from ..deps import ExtractResponse, PreviewResponse
from ...core.config import settings
from ...models.table import MarkdownPayload
from ...services.errors import (
    EmptyExtractionError,
    ExtractionServiceError,
    FileReadError,
    ImageTooLargeError,
    UnsupportedMediaError,
)
from ...services.gemini import extract_table
from ...services.table_transform import (
    ExportFile,
    csv_export,
    markdown_export,
    parse_table,
    render_preview_html,
)
from ...services.table_types import ExtractionRequest, today
from ...services.table_validation import validate_rows
from ...services.uploads import read_uploads

router = APIRouter(prefix="/tables", tags=["tables"])


def to_http_exception(e: Exception) -> HTTPException:
    """Map the extraction error taxonomy onto HTTP status codes"""
    if isinstance(e, UnsupportedMediaError):
        return HTTPException(status_code=415, detail=str(e))
    if isinstance(e, ImageTooLargeError):
        return HTTPException(status_code=413, detail=str(e))
    if isinstance(e, FileReadError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, EmptyExtractionError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, ExtractionServiceError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def export_response(export: ExportFile) -> Response:
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": export.content_disposition},
    )


def preview_response(markdown: str) -> PreviewResponse:
    rows = parse_table(markdown)
    return PreviewResponse(
        header=rows[0] if rows else [],
        rows=rows[1:],
        row_count=len(rows),
    )


@router.post("/extract", response_model=ExtractResponse)
async def extract(
    files: list[UploadFile] = File(...),
    context_date: str | None = Form(None),
):
    """
    Extract one 16-column table from one or more document images.

    All images go to the model in a single call, in upload order, and the
    model merges them into one table. context_date defaults to today (UTC)
    and fills 專案簽立 when the document has no signing date.

    Errors:
    - 400: an upload could not be read
    - 413 / 415: image too large / not an image
    - 422: the model answered but produced no table text
    - 502: the model call itself failed
    """
    try:
        request = ExtractionRequest(images=await read_uploads(files), context_date=context_date or today())
        markdown = await extract_table(request.images, request.context_date)
    except (
        FileReadError,
        UnsupportedMediaError,
        ImageTooLargeError,
        EmptyExtractionError,
        ExtractionServiceError,
    ) as e:
        logger.warning(f"Table extraction failed ({e.kind}): {e}")
        raise to_http_exception(e)

    rows = parse_table(markdown)
    return ExtractResponse(
        markdown=markdown,
        rows=rows,
        column_count=len(rows[0]) if rows else 0,
        warnings=validate_rows(rows),
        model=settings.llm_model,
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview(req: MarkdownPayload):
    """Split a pipe-table into header and data rows, separator lines dropped"""
    return preview_response(req.markdown)


@router.post("/preview.html", response_class=HTMLResponse)
async def preview_html(req: MarkdownPayload):
    return render_preview_html(req.markdown)


@router.post("/export/csv")
async def export_csv(req: MarkdownPayload):
    """BOM-prefixed, fully quoted CSV download"""
    return export_response(csv_export(req.markdown))


@router.post("/export/markdown")
async def export_markdown(req: MarkdownPayload):
    """The markdown exactly as given"""
    return export_response(markdown_export(req.markdown))
