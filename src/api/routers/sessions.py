from fastapi import APIRouter, UploadFile, File, HTTPException
from fastapi.responses import HTMLResponse
from loguru import logger
from .tables import export_response, preview_response, to_http_exception
from ..deps import PreviewResponse
from ...models.table import DataUriUpload
from ...services.errors import (
    ExtractionInProgressError,
    FileReadError,
    ImageTooLargeError,
    UnsupportedMediaError,
)
from ...services.extraction import run_extraction
from ...services.storage import ExtractionSession, session_store
from ...services.table_transform import csv_export, markdown_export, render_preview_html
from ...services.uploads import read_data_uri, read_uploads

router = APIRouter(prefix="/sessions", tags=["sessions"])

EXPORTERS = {
    "csv": csv_export,
    "md": markdown_export,
}


def get_session_or_404(session_id: str) -> ExtractionSession:
    session = session_store.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def require_result(session: ExtractionSession) -> str:
    if not session.markdown_result:
        raise HTTPException(status_code=404, detail="No extraction result for this session")
    return session.markdown_result


@router.post("")
async def create_session():
    session = session_store.create()
    logger.info("Session created", session_id=session.id)
    return session.to_dict()


@router.get("")
async def list_sessions():
    """List all sessions (for debugging)"""
    return {"sessions": session_store.list_all()}


@router.get("/{session_id}")
async def get_session(session_id: str):
    return get_session_or_404(session_id).to_dict()


@router.delete("/{session_id}")
async def delete_session(session_id: str):
    if not session_store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"deleted": session_id}


@router.post("/{session_id}/files")
async def add_files(session_id: str, files: list[UploadFile] = File(...)):
    """Queue images; a previous result or error is cleared"""
    session = get_session_or_404(session_id)
    try:
        session.ensure_not_loading()
        images = await read_uploads(files)
        session.add_files(images)
    except ExtractionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (FileReadError, UnsupportedMediaError, ImageTooLargeError) as e:
        raise to_http_exception(e)
    return session.to_dict()


@router.post("/{session_id}/files/data-uri")
async def add_data_uri_files(session_id: str, req: DataUriUpload):
    """Queue images sent as base64 data URIs; same rules as multipart uploads"""
    session = get_session_or_404(session_id)
    try:
        session.ensure_not_loading()
        images = [read_data_uri(i.data_uri, i.mime_type, i.filename) for i in req.images]
        session.add_files(images)
    except ExtractionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (FileReadError, UnsupportedMediaError, ImageTooLargeError) as e:
        raise to_http_exception(e)
    return session.to_dict()


@router.delete("/{session_id}/files/{index}")
async def remove_file(session_id: str, index: int):
    session = get_session_or_404(session_id)
    try:
        session.remove_file(index)
    except ExtractionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session.to_dict()


@router.post("/{session_id}/analyze")
async def analyze(session_id: str):
    """
    Run the extraction for every queued image.

    Always answers 200 with the session state: failures land in
    error_message with status ERROR. With nothing queued the state is returned
    unchanged and no model call is made.
    """
    session = get_session_or_404(session_id)
    try:
        await run_extraction(session)
    except ExtractionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_dict()


@router.post("/{session_id}/reset")
async def reset_session(session_id: str):
    session = get_session_or_404(session_id)
    try:
        session.reset()
    except ExtractionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.to_dict()


@router.get("/{session_id}/preview", response_model=PreviewResponse)
async def session_preview(session_id: str):
    return preview_response(require_result(get_session_or_404(session_id)))


@router.get("/{session_id}/preview.html", response_class=HTMLResponse)
async def session_preview_html(session_id: str):
    return render_preview_html(require_result(get_session_or_404(session_id)))


@router.get("/{session_id}/export/{fmt}")
async def export_session(session_id: str, fmt: str):
    exporter = EXPORTERS.get(fmt)
    if exporter is None:
        raise HTTPException(status_code=404, detail=f"Unknown export format: {fmt}")
    markdown = require_result(get_session_or_404(session_id))
    return export_response(exporter(markdown))
