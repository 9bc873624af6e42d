"""
One-off seeding script: load questions from a CSV/XLSX file into the
question pool without going through the admin panel.

Usage:
    python scripts/seed_questions.py questions.xlsx

Every row is saved as a new question (placeholder ids get fresh storage
ids), so running it twice on the same file creates duplicates.
"""
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.core.errors import CoreError
from app.db.base import Base, engine
from app.db.session import SessionLocal
from app.importer.spreadsheet import QuestionImporter
from app.questions.store import SqlQuestionStore


def seed_questions(path: Path) -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        importer = QuestionImporter(SqlQuestionStore(db))
        questions = importer.parse_upload(path.read_bytes(), path.name)
        saved = importer.bulk_save(questions)

        print("✅ Question seeding complete")
        print(f"   File: {path}")
        print(f"   Saved: {saved}")
        return saved

    except CoreError as e:
        print("❌ Error while seeding questions")
        print(f"   {e.kind}: {e.message}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/seed_questions.py <file.csv|file.xlsx>")
        sys.exit(2)

    try:
        seed_questions(Path(sys.argv[1]))
    except CoreError:
        sys.exit(1)
