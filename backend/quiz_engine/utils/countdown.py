"""Countdown state machine for a single quiz attempt.

States:
- `untimed`: no time limit, elapsed seconds accumulate
- `running`: countdown active
- `expired`: countdown reached zero (terminal)
- `stopped`: the student submitted first (terminal)

The timer is tick-driven; something else (the session ticker in
production, the test itself in tests) decides when a second has passed.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

UNTIMED = "untimed"
RUNNING = "running"
EXPIRED = "expired"
STOPPED = "stopped"

TERMINAL_STATES = (EXPIRED, STOPPED)


class QuizTimer:
    def __init__(self, time_limit_minutes: Optional[int], on_expire: Optional[Callable[[], None]] = None,
                 elapsed_seconds: int = 0):
        self._lock = threading.Lock()
        self._on_expire = on_expire
        self._elapsed = max(0, int(elapsed_seconds))
        if time_limit_minutes:
            self.budget_seconds: Optional[int] = int(time_limit_minutes) * 60
            self._remaining: Optional[int] = max(0, self.budget_seconds - self._elapsed)
            self._state = RUNNING if self._remaining > 0 else EXPIRED
        else:
            self.budget_seconds = None
            self._remaining = None
            self._state = UNTIMED

    @property
    def state(self) -> str:
        return self._state

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self._remaining

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def time_spent(self) -> int:
        if self.budget_seconds is not None:
            return self.budget_seconds - self._remaining
        return self._elapsed

    def tick(self, seconds: int = 1) -> str:
        """Advance the clock; fire the expiry callback on reaching zero."""
        fire = False
        with self._lock:
            if self._state == UNTIMED:
                self._elapsed += seconds
            elif self._state == RUNNING:
                self._remaining = max(0, self._remaining - seconds)
                if self._remaining == 0:
                    self._state = EXPIRED
                    fire = True
            state = self._state
        if fire and self._on_expire is not None:
            self._on_expire()
        return state

    def stop(self) -> bool:
        """Stop the clock for a manual submission.

        Returns False when the timer already reached a terminal state.
        """
        with self._lock:
            if self._state in TERMINAL_STATES:
                return False
            self._state = STOPPED
            return True

    def snapshot(self) -> dict:
        return {
            'state': self._state,
            'remaining_seconds': self._remaining,
            'time_spent': self.time_spent,
        }
