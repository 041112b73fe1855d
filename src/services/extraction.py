from typing import Awaitable, Callable, List
from loguru import logger
from .errors import ExtractionInProgressError, GENERIC_FAILURE_MESSAGE
from .gemini import extract_table
from .storage.sessions import AppStatus, ExtractionSession
from .table_types import ExtractionRequest, ImageInput

Extractor = Callable[[List[ImageInput], str], Awaitable[str]]


async def run_extraction(session: ExtractionSession, extract: Extractor = extract_table) -> ExtractionSession:
    """
    Run one extraction for everything queued in the session.

    With no queued files this is a no-op and no call is made. Every failure is
    caught here and stored on the session as a single message. A cancelled
    call also leaves the session in ERROR, so LOADING never outlives the call.
    """
    if not session.can_analyze:
        if session.status == AppStatus.LOADING:
            raise ExtractionInProgressError("An extraction is already running for this session")
        logger.info("Extraction trigger ignored: no files queued", session_id=session.id)
        return session

    request = ExtractionRequest(images=list(session.files))
    session.start_loading()
    logger.info("Extraction started", session_id=session.id, files=len(request.images))

    try:
        markdown = await extract(request.images, request.context_date)
    except Exception as e:
        logger.error(f"Extraction failed for session {session.id}: {e}")
        session.fail(str(e) or GENERIC_FAILURE_MESSAGE)
        return session
    except BaseException:
        logger.warning("Extraction cancelled", session_id=session.id)
        session.fail(GENERIC_FAILURE_MESSAGE)
        raise

    session.succeed(markdown)
    logger.info("Extraction succeeded", session_id=session.id, chars=len(markdown))
    return session
