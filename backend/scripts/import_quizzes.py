"""CLI script to import quiz definition files (JSON or CSV) into a course.
Usage: python scripts/import_quizzes.py --course COURSE_ID FILE [FILE ...] [--dry-run] [--allow-duplicates]
"""
import sys
import argparse
import pathlib
from typing import List
# Ensure `backend/` is on sys.path so `quiz_engine` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from quiz_engine.database import engine, create_db_and_tables
from quiz_engine.errors import QuizImportError
from quiz_engine import services


def main(course_id: int, files: List[pathlib.Path], dry_run: bool = False, deduplicate: bool = True) -> int:
    """Import each file into `course_id` and print a per-file summary.

    Returns the total number of quizzes created.
    """
    create_db_and_tables()
    total_created = 0
    total_skipped = 0
    with Session(engine) as session:
        svc = services.ImportService(session)
        for f in files:
            try:
                result = svc.import_file(f.read_bytes(), f.name, course_id, deduplicate=deduplicate, dry_run=dry_run)
            except (OSError, QuizImportError) as e:
                print(f'Error importing {f}: {e}')
                continue
            total_created += result['created']
            total_skipped += result['skipped']
            print(f"Imported {f}: created {result['created']}, skipped {result['skipped']}, errors {len(result['errors'])}")
            for err in result['errors']:
                print(f"  item {err['index']} ({err.get('title')}): {err['error']}")
    suffix = ' (dry run)' if dry_run else ''
    print(f'Total created quizzes: {total_created}, skipped {total_skipped}{suffix}')
    return total_created


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('files', nargs='+', type=pathlib.Path, help='JSON or CSV quiz files')
    parser.add_argument('--course', type=int, required=True, help='Course id the quizzes belong to')
    parser.add_argument('--dry-run', action='store_true', help='Validate only, write nothing')
    parser.add_argument('--allow-duplicates', action='store_true', help='Import even if the title exists in the course')
    args = parser.parse_args()
    main(args.course, args.files, dry_run=args.dry_run, deduplicate=not args.allow_duplicates)
