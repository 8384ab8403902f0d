"""CSV and PDF export of extracted tables."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fpdf import FPDF

from datacapture.schema.extraction import ExtractedTable

logger = logging.getLogger(__name__)

CSV_FILENAME = "extracted_data.csv"
CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
PDF_FILENAME = "extracted_data.pdf"
PDF_MEDIA_TYPE = "application/pdf"

# Page geometry in millimetres (A4 portrait).
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN = 10.0
LINE_HEIGHT = 7.0
TITLE_Y = 15.0
CELL_PADDING = 2.0

TITLE_FONT_SIZE = 16
SECTION_FONT_SIZE = 12
BODY_FONT_SIZE = 8
PLACEHOLDER_FONT_SIZE = 10

REPORT_TITLE = "Extracted Data Report"
SECTION_TITLE = "Structured Table Data:"
CONTINUED_TITLE = "Structured Table Data (Continued)"
NO_DATA_TEXT = "No structured table data was extracted."
EMPTY_EXPORT_MESSAGE = "No structured table data available to export."

# Narrowest wrap width; keeps very wide tables from wrapping one character per line.
MIN_WRAP_WIDTH = 5.0

# (text, font size in pt, bold) -> rendered width in mm
Measure = Callable[[str, float, bool], float]


class EmptyTableError(ValueError):
  """Raised when an export is requested for a table without headers or rows."""

  def __init__(self, message: str = EMPTY_EXPORT_MESSAGE) -> None:
    super().__init__(message)


@dataclass(frozen=True)
class ExportedFile:
  filename: str
  media_type: str
  content: bytes


def _ensure_exportable(table: ExtractedTable) -> None:
  if not table.headers or not table.rows:
    raise EmptyTableError()


# ---------- CSV ----------


def table_to_csv(table: ExtractedTable) -> str:
  """Serialize the header row and data rows with RFC 4180 quoting.

  Cells are quoted only when they contain a comma, newline or double quote,
  so a row holding a single blank cell is written as an empty line.
  """
  buffer = io.StringIO()
  writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
  for row in [table.headers, *table.rows]:
    # csv.writer emits `""` for a lone empty field.
    if len(row) == 1 and row[0] == "":
      buffer.write("\n")
      continue
    writer.writerow(row)
  return buffer.getvalue()


def export_csv(table: ExtractedTable) -> ExportedFile:
  _ensure_exportable(table)
  content = table_to_csv(table).encode("utf-8")
  logger.info("Exported CSV rows=%d columns=%d bytes=%d", len(table.rows), len(table.headers), len(content))
  return ExportedFile(filename=CSV_FILENAME, media_type=CSV_MEDIA_TYPE, content=content)


# ---------- PDF layout ----------


@dataclass(frozen=True)
class PlacedText:
  """A block of lines drawn from baseline `y`, one line every LINE_HEIGHT."""

  x: float
  y: float
  font_size: float
  lines: tuple[str, ...]
  bold: bool = False


@dataclass
class PdfPage:
  items: list[PlacedText] = field(default_factory=list)
  header_rows: int = 0
  data_rows: int = 0

  def texts(self) -> list[str]:
    return [line for item in self.items for line in item.lines]


def _split_word(word: str, width: float, font_size: float, measure: Measure, bold: bool) -> list[str]:
  """Cut a word into chunks no wider than `width`, one measurement per character."""
  chunks: list[str] = []
  current = ""
  current_width = 0.0
  for char in word:
    char_width = measure(char, font_size, bold)
    if current and current_width + char_width > width:
      chunks.append(current)
      current, current_width = "", 0.0
    current += char
    current_width += char_width
  chunks.append(current)
  return chunks


def wrap_text(text: str, width: float, font_size: float, measure: Measure, *, bold: bool = False) -> list[str]:
  """Greedy word wrap; words wider than `width` are split by characters."""
  width = max(width, MIN_WRAP_WIDTH)
  lines: list[str] = []
  for paragraph in text.split("\n"):
    current = ""
    for word in paragraph.split():
      candidate = f"{current} {word}" if current else word
      if measure(candidate, font_size, bold) <= width:
        current = candidate
        continue
      if current:
        lines.append(current)
        current = ""
      if measure(word, font_size, bold) > width:
        *full_chunks, word = _split_word(word, width, font_size, measure, bold)
        lines.extend(full_chunks)
      current = word
    lines.append(current)
  return lines or [""]


class _TableLayout:
  def __init__(self, table: ExtractedTable, measure: Measure) -> None:
    self._headers = [str(header) for header in table.headers]
    self._rows = table.rows
    self._measure = measure
    self._column_count = max(1, len(self._headers))
    self._column_width = (PAGE_WIDTH - MARGIN * 2) / self._column_count
    self.pages: list[PdfPage] = []
    self._y = 0.0

  @property
  def _page(self) -> PdfPage:
    return self.pages[-1]

  def _place(self, x: float, font_size: float, lines: list[str], *, bold: bool = False) -> None:
    self._page.items.append(PlacedText(x=x, y=self._y, font_size=font_size, lines=tuple(lines), bold=bold))

  def _wrap_cells(self, cells: list[Any], *, bold: bool = False) -> list[list[str]]:
    width = self._column_width - CELL_PADDING
    return [wrap_text("" if cell is None else str(cell), width, BODY_FONT_SIZE, self._measure, bold=bold) for cell in cells[: self._column_count]]

  def _emit_row(self, wrapped: list[list[str]], *, bold: bool = False) -> None:
    for index, lines in enumerate(wrapped):
      self._place(MARGIN + index * self._column_width, BODY_FONT_SIZE, lines, bold=bold)
    self._y += LINE_HEIGHT * max([len(lines) for lines in wrapped] or [1])

  def _emit_header(self) -> None:
    self._emit_row(self._wrap_cells(list(self._headers), bold=True), bold=True)
    self._page.header_rows += 1

  def _new_page(self, heading: str) -> None:
    self.pages.append(PdfPage())
    self._y = MARGIN
    self._place(MARGIN, SECTION_FONT_SIZE, [heading])
    self._y += LINE_HEIGHT * 1.5
    self._emit_header()

  def build(self) -> list[PdfPage]:
    self.pages.append(PdfPage())
    self._y = TITLE_Y
    self._place(MARGIN, TITLE_FONT_SIZE, [REPORT_TITLE], bold=True)
    self._y += LINE_HEIGHT * 2

    if not self._rows:
      self._place(MARGIN, PLACEHOLDER_FONT_SIZE, [NO_DATA_TEXT])
      return self.pages

    self._place(MARGIN, SECTION_FONT_SIZE, [SECTION_TITLE])
    self._y += LINE_HEIGHT * 1.5
    self._emit_header()

    limit = PAGE_HEIGHT - MARGIN
    for row in self._rows:
      wrapped = self._wrap_cells(list(row))
      row_height = LINE_HEIGHT * max([len(lines) for lines in wrapped] or [1])
      # A row taller than a whole page still goes on a fresh page rather than looping.
      if self._y + row_height > limit and self._page.data_rows > 0:
        self._new_page(CONTINUED_TITLE)
      self._emit_row(wrapped)
      self._page.data_rows += 1

    return self.pages


def layout_table_pdf(table: ExtractedTable, measure: Measure) -> list[PdfPage]:
  """Lay the table out on pages; the header row is repeated on each page."""
  return _TableLayout(table, measure).build()


# ---------- PDF rendering ----------


def _latin1(text: str) -> str:
  # Core PDF fonts only cover latin-1.
  return text.encode("latin-1", "replace").decode("latin-1")


def _new_document() -> FPDF:
  pdf = FPDF(orientation="P", unit="mm", format="A4")
  pdf.set_auto_page_break(auto=False)
  pdf.set_margins(MARGIN, MARGIN, MARGIN)
  pdf.set_title(REPORT_TITLE)
  pdf.set_font("Helvetica", size=BODY_FONT_SIZE)
  return pdf


def _fpdf_measure(pdf: FPDF) -> Measure:
  def measure(text: str, font_size: float, bold: bool) -> float:
    pdf.set_font("Helvetica", style="B" if bold else "", size=font_size)
    return pdf.get_string_width(_latin1(text))

  return measure


def render_table_pdf(table: ExtractedTable) -> bytes:
  """Render the table report to PDF bytes."""
  pdf = _new_document()
  pages = layout_table_pdf(table, _fpdf_measure(pdf))
  for page in pages:
    pdf.add_page()
    for item in page.items:
      pdf.set_font("Helvetica", style="B" if item.bold else "", size=item.font_size)
      for offset, line in enumerate(item.lines):
        if line:
          pdf.text(item.x, item.y + offset * LINE_HEIGHT, _latin1(line))
  return bytes(pdf.output())


def export_pdf(table: ExtractedTable) -> ExportedFile:
  _ensure_exportable(table)
  content = render_table_pdf(table)
  logger.info("Exported PDF rows=%d columns=%d bytes=%d", len(table.rows), len(table.headers), len(content))
  return ExportedFile(filename=PDF_FILENAME, media_type=PDF_MEDIA_TYPE, content=content)
