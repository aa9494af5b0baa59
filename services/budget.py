"""
External Call Budget

Caps how many provider calls are made within a time window. A slot is
reserved before each call and handed back if the call fails, so the count
only reflects successful calls.

Two backends:
- MemoryRateBudget: process scoped, guarded by a lock
- DatabaseRateBudget: one shared row updated with conditional UPDATEs, so
  every worker process draws from the same quota
"""

import logging
import threading
import time
from datetime import timedelta

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from models import db, ApiBudgetWindow, utcnow
from .errors import UpstreamRateLimited

logger = logging.getLogger(__name__)


class MemoryRateBudget:
    """In-process call counter with a fixed window."""

    def __init__(self, quota, window_seconds, clock=time.monotonic):
        self.quota = quota
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self._window_start = clock()

    def acquire(self):
        """Reserve one call, raising UpstreamRateLimited if the quota is spent."""
        with self._lock:
            now = self._clock()
            if now - self._window_start >= self.window_seconds:
                logger.info("Rate budget window elapsed after %d calls; resetting", self._count)
                self._count = 0
                self._window_start = now
            if self._count >= self.quota:
                logger.warning("Rate budget exhausted (%d/%d)", self._count, self.quota)
                raise UpstreamRateLimited(
                    'External call budget exhausted',
                    {'quota': self.quota, 'retry_after': self._seconds_left(now)},
                )
            self._count += 1

    def release(self):
        """Give back a slot reserved for a call that did not succeed."""
        with self._lock:
            if self._count > 0:
                self._count -= 1

    def _seconds_left(self, now):
        return max(0, int(self.window_seconds - (now - self._window_start)))

    def status(self):
        with self._lock:
            now = self._clock()
            if now - self._window_start >= self.window_seconds:
                count = 0
                seconds_left = self.window_seconds
            else:
                count = self._count
                seconds_left = self._seconds_left(now)
        remaining = max(0, self.quota - count)
        return {
            'backend': 'memory',
            'request_count': count,
            'remaining_requests': remaining,
            'quota': self.quota,
            'resets_in_seconds': seconds_left,
            'is_healthy': remaining > 0,
        }


class DatabaseRateBudget:
    """Call counter stored in the api_budget_window table.

    Each step is a single conditional UPDATE, so concurrent workers cannot
    both take the last slot.
    """

    def __init__(self, quota, window_seconds, name='spoonacular', clock=utcnow):
        self.quota = quota
        self.window = timedelta(seconds=window_seconds)
        self.name = name
        self._clock = clock

    def _ensure_row(self, now):
        if db.session.get(ApiBudgetWindow, self.name) is not None:
            return
        try:
            db.session.add(ApiBudgetWindow(name=self.name, window_start=now, call_count=0))
            db.session.commit()
        except IntegrityError:
            # Another worker created it first
            db.session.rollback()

    def acquire(self):
        now = self._clock()
        self._ensure_row(now)

        # Reset the window if it has elapsed
        reset = db.session.execute(
            update(ApiBudgetWindow)
            .where(ApiBudgetWindow.name == self.name)
            .where(ApiBudgetWindow.window_start <= now - self.window)
            .values(window_start=now, call_count=0)
        )
        if reset.rowcount:
            logger.info("Rate budget window for %s reset", self.name)

        # Compare-and-swap: only increments while under quota
        reserved = db.session.execute(
            update(ApiBudgetWindow)
            .where(ApiBudgetWindow.name == self.name)
            .where(ApiBudgetWindow.call_count < self.quota)
            .values(call_count=ApiBudgetWindow.call_count + 1)
        )
        db.session.commit()

        if reserved.rowcount == 0:
            logger.warning("Rate budget %s exhausted (quota %d)", self.name, self.quota)
            raise UpstreamRateLimited('External call budget exhausted', {'quota': self.quota})

    def release(self):
        db.session.execute(
            update(ApiBudgetWindow)
            .where(ApiBudgetWindow.name == self.name)
            .where(ApiBudgetWindow.call_count > 0)
            .values(call_count=ApiBudgetWindow.call_count - 1)
        )
        db.session.commit()

    def status(self):
        now = self._clock()
        row = db.session.get(ApiBudgetWindow, self.name)
        if row is not None:
            db.session.refresh(row)
        if row is None or row.window_start <= now - self.window:
            count = 0
            seconds_left = int(self.window.total_seconds())
        else:
            count = row.call_count
            seconds_left = max(0, int((row.window_start + self.window - now).total_seconds()))
        remaining = max(0, self.quota - count)
        return {
            'backend': 'database',
            'request_count': count,
            'remaining_requests': remaining,
            'quota': self.quota,
            'resets_in_seconds': seconds_left,
            'is_healthy': remaining > 0,
        }


def build_rate_budget(config):
    """Create the budget selected by RATE_BUDGET_BACKEND."""
    backend = config.get('RATE_BUDGET_BACKEND', 'memory')
    quota = config['RATE_BUDGET_QUOTA']
    window = config['RATE_BUDGET_WINDOW']
    if backend == 'database':
        return DatabaseRateBudget(quota, window)
    if backend != 'memory':
        raise ValueError(f"Unknown RATE_BUDGET_BACKEND: {backend}")
    return MemoryRateBudget(quota, window)
