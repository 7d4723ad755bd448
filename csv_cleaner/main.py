import logging
from typing import Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from .errors import CleanerError, UnsupportedFormatError, UploadTooLargeError
from .export import content_disposition
from .models import CleaningOptions, CleanResponse, HealthResponse, SessionResponse
from .parse import decode_bytes, parse_csv
from .rules import SUPPORTED_EXTENSIONS
from .session import CleaningSession, SessionStore
from .settings import get_settings

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="csv-cleaner",
    description="Upload, clean and export delimited text tables",
    version="0.1.0",
)

store = SessionStore(max_sessions=settings.max_sessions, ttl_seconds=settings.session_ttl_seconds)


@app.exception_handler(CleanerError)
async def cleaner_error_handler(request: Request, exc: CleanerError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def _session_response(session: CleaningSession, search: Optional[str] = None) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        file_name=session.file_name,
        delimiter=session.delimiter,
        encoding=session.encoding,
        table=session.preview(settings.preview_rows, search=search),
        stats=session.last_stats,
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def upload_csv(file: UploadFile = File(...)):
    file_name = file.filename or ""
    if not file_name.lower().endswith(SUPPORTED_EXTENSIONS):
        raise UnsupportedFormatError(file.filename)

    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise UploadTooLargeError(len(raw), settings.max_upload_bytes)

    text, encoding = decode_bytes(raw)
    session = store.add(CleaningSession.from_parsed(file_name, parse_csv(text), encoding=encoding))
    return _session_response(session)


@app.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, search: Optional[str] = None):
    return _session_response(store.get(session_id), search=search)


@app.post("/sessions/{session_id}/clean", response_model=CleanResponse)
def clean_session(session_id: str, options: Optional[CleaningOptions] = None):
    session = store.get(session_id)
    try:
        stats = session.apply(options)
    except Exception as exc:
        raise HTTPException(status_code=422, detail=f"Error cleaning data: {exc}") from exc

    return CleanResponse(
        session_id=session.session_id,
        stats=stats,
        table=session.preview(settings.preview_rows),
    )


@app.get("/sessions/{session_id}/export")
def export_session(session_id: str):
    session = store.get(session_id)
    body = session.export().encode(settings.export_encoding)
    logger.info(f"Exporting session {session_id} as {session.export_filename}")
    return Response(
        content=body,
        media_type=f"text/csv; charset={settings.export_encoding}",
        headers={"Content-Disposition": content_disposition(session.export_filename)},
    )


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str):
    store.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
