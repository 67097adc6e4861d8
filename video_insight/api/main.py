from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from video_insight.api.models import ErrorResponse
from video_insight.api.routes.download import router as download_router
from video_insight.api.routes.transcribe import router as transcribe_router
from video_insight.config import settings
from video_insight.errors import PipelineError
from video_insight.logging_config import setup_logging

setup_logging(settings)

app = FastAPI(
    title="Video Insight API",
    description="Video download, transcription and AI content analysis",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(download_router)
app.include_router(transcribe_router)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    body = ErrorResponse(error=exc.label, details=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Missing or mistyped input is a 400 at this boundary, not FastAPI's 422.
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    body = ErrorResponse(error="Invalid request", details=details)
    return JSONResponse(status_code=400, content=body.model_dump())


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
