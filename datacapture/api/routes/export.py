"""Router for table downloads (CSV, PDF)."""

from fastapi import APIRouter
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from datacapture.schema.extraction import ExtractedTable
from datacapture.services.export import ExportedFile, export_csv, export_pdf

router = APIRouter()


def _attachment(exported: ExportedFile) -> Response:
  return Response(content=exported.content, media_type=exported.media_type, headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'})


@router.post("/csv", response_class=Response, responses={400: {"description": "No structured table data available to export."}})
async def download_csv(table: ExtractedTable) -> Response:
  """Export the table as `extracted_data.csv`."""
  return _attachment(export_csv(table))


@router.post("/pdf", response_class=Response, responses={400: {"description": "No structured table data available to export."}})
async def download_pdf(table: ExtractedTable) -> Response:
  """Export the table as `extracted_data.pdf`."""
  # Large tables take a while to lay out; keep the event loop free.
  return _attachment(await run_in_threadpool(export_pdf, table))
