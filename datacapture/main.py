from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from datacapture import __version__
from datacapture.api.routes import capture, export
from datacapture.config import get_settings
from datacapture.core.exceptions import empty_table_exception_handler, global_exception_handler, http_exception_handler, request_validation_exception_handler
from datacapture.core.lifespan import lifespan
from datacapture.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from datacapture.services.export import EmptyTableError

settings = get_settings()

app = FastAPI(title="Data Capture", version=__version__, lifespan=lifespan, docs_url="/docs" if settings.debug else None, redoc_url=None)

app.add_middleware(CORSMiddleware, allow_origins=settings.allowed_origins, allow_credentials=True, allow_methods=["GET", "POST", "OPTIONS"], allow_headers=["content-type", "authorization"], expose_headers=["content-length", "content-disposition", "x-request-id"])

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(EmptyTableError, empty_table_exception_handler)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": __version__}


app.include_router(capture.router, prefix="/v1/capture", tags=["capture"])
app.include_router(export.router, prefix="/v1/export", tags=["export"])
