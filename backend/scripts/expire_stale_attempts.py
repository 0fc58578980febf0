"""CLI script to finalize attempts left open past their deadline.

Runs the same sweep the API's countdown thread runs periodically; useful
after downtime or from cron when the API is not running.
Usage: python scripts/expire_stale_attempts.py
"""
import sys
import pathlib
# Ensure `backend/` is on sys.path so `quiz_engine` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from quiz_engine.database import engine
from quiz_engine import services
from quiz_engine.utils.sessions import SessionRegistry


def main() -> int:
    with Session(engine) as session:
        closed = services.AttemptService(session, SessionRegistry()).expire_stale_attempts()
    print(f'Closed {closed} stale attempts')
    return closed


if __name__ == '__main__':
    main()
