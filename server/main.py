"""
Main FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slidevector import __version__ as slidevector_version
from slidevector.config import ConversionSettings
from slidevector.errors import SlideVectorError
from slidevector.pipeline import SlideVectorPipeline
from server.models import ConvertResponse, ErrorResponse


# Lifespan context manager
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    load_dotenv()
    app.state.settings = ConversionSettings.from_env()
    yield
    # Shutdown
    pass

app = FastAPI(
    title="SlideVector API",
    description="Convert PPTX presentations to SVG slide images",
    version=slidevector_version,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


def error_response(error: str, status_code: int, code: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


# --- API Endpoints ---

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "SlideVector API is running"}


@app.post(
    "/api/convert",
    response_model=ConvertResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def convert_presentation(file: Optional[UploadFile] = File(None)):
    """
    Convert an uploaded PPTX into one SVG image per slide.

    Runs synchronously in FastAPI's threadpool; the response carries every
    slide, with placeholders for slides that could not be decoded.
    """
    if file is None or not file.filename:
        return error_response("No file provided", 400)

    data = file.file.read()
    print(f"[Server] Processing: {file.filename}, size: {len(data)}")

    settings = getattr(app.state, "settings", None) or ConversionSettings.from_env()
    pipeline = SlideVectorPipeline(settings)

    try:
        result = pipeline.convert(data, file.filename)
    except SlideVectorError as e:
        return JSONResponse(status_code=400, content=e.to_dict())
    except Exception as e:
        print(f"[Server] Processing error: {e}")
        return error_response(str(e) or "Unknown error", 500)

    print(f"[Server] Successfully rendered {result.total_slides} slides")
    return JSONResponse(content=result.to_dict())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
