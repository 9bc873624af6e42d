"""
Spreadsheet question importer.

Turns an uploaded .csv / .xlsx / .xls file into a list of Question records
ready for review, and bulk-saves reviewed lists through a QuestionStore.

The first row is the header row. Header cells are matched (lower-cased,
trimmed) against HEADER_SYNONYMS; unknown headers are ignored. Rows without
both a title and a description are dropped.
"""
import io
import logging
import math
import uuid
import warnings
from typing import Any, List, Optional

import pandas as pd

from app.core.errors import InvalidArgument, NoValidQuestions, UnsupportedFormat
from app.questions.schemas import PLACEHOLDER_PREFIX, Question
from app.questions.store import QuestionStore

logger = logging.getLogger(__name__)

HEADER_SYNONYMS = {
    "title": "title",
    "question": "title",
    "problem": "title",
    "name": "title",
    "description": "description",
    "desc": "description",
    "details": "description",
    "problem statement": "description",
    "difficulty": "difficulty",
    "level": "difficulty",
    "category": "category",
    "topic": "category",
    "tags": "tags",
    "tag": "tags",
    "example": "example",
    "examples": "example",
    "constraints": "constraints",
    "constraint": "constraints",
}

WORKBOOK_ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _cell_text(value: Any) -> str:
    """Raw cell value -> trimmed string. Empty cells become ""."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _read_csv(data: bytes) -> List[List[Any]]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidArgument("CSV files must be UTF-8 encoded") from exc

    if not text.strip():
        return []

    with warnings.catch_warnings():
        # Rows longer than the header are truncated by pandas with a warning
        warnings.simplefilter("ignore", pd.errors.ParserWarning)
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=lambda fields: fields,
        )
    return frame.values.tolist()


def _read_workbook(data: bytes, engine: str) -> List[List[Any]]:
    try:
        frame = pd.read_excel(
            io.BytesIO(data),
            sheet_name=0,
            header=None,
            dtype=object,
            engine=engine,
        )
    except Exception as exc:
        logger.warning("[IMPORT] workbook decode failed engine=%s: %r", engine, exc)
        raise InvalidArgument("Failed to process file: not a readable spreadsheet") from exc
    return frame.values.tolist()


def read_rows(data: bytes, filename: str) -> List[List[Any]]:
    """Decode the upload into a grid of raw cell values (first sheet only)."""
    name = (filename or "").strip().lower()

    if name.endswith(".csv"):
        return _read_csv(data)

    for extension, engine in WORKBOOK_ENGINES.items():
        if name.endswith(extension):
            return _read_workbook(data, engine)

    raise UnsupportedFormat("Unsupported file format. Please upload CSV or XLSX files.")


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def map_headers(header_row: List[Any]) -> dict[str, int]:
    """Canonical field -> column index. The rightmost duplicate wins."""
    columns: dict[str, int] = {}
    for index, cell in enumerate(header_row):
        field = HEADER_SYNONYMS.get(_cell_text(cell).lower())
        if field:
            columns[field] = index
    return columns


def split_tags(value: str) -> List[str]:
    return [piece.strip() for piece in value.split(",") if piece.strip()]


def _new_placeholder_id(batch: str, row_number: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{batch}_{row_number}"


def rows_to_questions(rows: List[List[Any]]) -> List[Question]:
    if not rows or len(rows) < 2:
        return []

    columns = map_headers(rows[0])
    batch = uuid.uuid4().hex[:12]
    questions: List[Question] = []

    for row_number, row in enumerate(rows[1:], start=1):
        cells = [_cell_text(c) for c in row]
        if not any(cells):
            continue

        fields: dict[str, Any] = {}
        for field, index in columns.items():
            text = cells[index] if index < len(cells) else ""
            fields[field] = split_tags(text) if field == "tags" else text

        if not fields.get("title") or not fields.get("description"):
            continue

        questions.append(Question(id=_new_placeholder_id(batch, row_number), **fields))

    return questions


def parse_upload(data: bytes, filename: str) -> List[Question]:
    """
    Parse an uploaded file into questions.

    Raises UnsupportedFormat for unknown extensions and NoValidQuestions when
    no row survives validation.
    """
    rows = read_rows(data, filename)
    questions = rows_to_questions(rows)

    logger.info("[IMPORT] file=%s rows=%d accepted=%d", filename, max(len(rows) - 1, 0), len(questions))

    if not questions:
        raise NoValidQuestions("No valid questions found in the file")
    return questions


# ---------------------------------------------------------------------------
# Importer service
# ---------------------------------------------------------------------------

class QuestionImporter:

    def __init__(self, store: QuestionStore):
        self.store = store

    def parse_upload(self, data: bytes, filename: str) -> List[Question]:
        return parse_upload(data, filename)

    def bulk_save(self, questions: Optional[List[Question]]) -> int:
        """
        Upsert a reviewed list of questions in one batch.

        Placeholder ids (and missing ids) get a fresh storage id; any other
        id overwrites the existing question's content.
        """
        if questions is None:
            raise InvalidArgument("Invalid questions data")

        for position, q in enumerate(questions, start=1):
            if not q.title.strip() or not q.description.strip():
                raise InvalidArgument(f"Question #{position} needs a title and a description")

        prepared = [
            q.model_copy(update={"id": self.store.new_id()}) if q.is_placeholder else q
            for q in questions
        ]
        self.store.save_all(prepared)

        logger.info(
            "[IMPORT] saved=%d new=%d updated=%d",
            len(prepared),
            sum(1 for q in questions if q.is_placeholder),
            sum(1 for q in questions if not q.is_placeholder),
        )
        return len(prepared)
