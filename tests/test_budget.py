from datetime import datetime, timedelta

import pytest

from models import db, ApiBudgetWindow
from services.budget import DatabaseRateBudget, MemoryRateBudget, build_rate_budget
from services.errors import UpstreamRateLimited


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, amount):
        self.now = self.now + amount


class TestMemoryRateBudget:
    def test_quota_is_enforced(self):
        budget = MemoryRateBudget(quota=2, window_seconds=60, clock=FakeClock(0))
        budget.acquire()
        budget.acquire()
        with pytest.raises(UpstreamRateLimited) as exc_info:
            budget.acquire()
        assert exc_info.value.status_code == 429
        assert budget.status()['remaining_requests'] == 0
        assert budget.status()['is_healthy'] is False

    def test_window_reset_counts_the_new_call(self):
        clock = FakeClock(0)
        budget = MemoryRateBudget(quota=2, window_seconds=60, clock=clock)
        budget.acquire()
        budget.acquire()

        clock.advance(61)
        budget.acquire()

        status = budget.status()
        assert status['request_count'] == 1
        assert status['remaining_requests'] == 1

    def test_release_refunds_a_slot(self):
        budget = MemoryRateBudget(quota=1, window_seconds=60, clock=FakeClock(0))
        budget.acquire()
        budget.release()
        budget.acquire()
        assert budget.status()['request_count'] == 1

    def test_release_never_goes_negative(self):
        budget = MemoryRateBudget(quota=3, window_seconds=60, clock=FakeClock(0))
        budget.release()
        assert budget.status()['request_count'] == 0

    def test_status_reports_time_until_reset(self):
        clock = FakeClock(100)
        budget = MemoryRateBudget(quota=5, window_seconds=60, clock=clock)
        clock.advance(20)
        assert budget.status()['resets_in_seconds'] == 40


class TestDatabaseRateBudget:
    def test_quota_is_shared_through_the_table(self, app):
        clock = FakeClock(datetime(2026, 1, 1, 12, 0, 0))
        first = DatabaseRateBudget(quota=2, window_seconds=3600, clock=clock)
        second = DatabaseRateBudget(quota=2, window_seconds=3600, clock=clock)

        first.acquire()
        second.acquire()
        with pytest.raises(UpstreamRateLimited):
            first.acquire()

        row = db.session.get(ApiBudgetWindow, 'spoonacular')
        db.session.refresh(row)
        assert row.call_count == 2

    def test_window_reset(self, app):
        clock = FakeClock(datetime(2026, 1, 1, 12, 0, 0))
        budget = DatabaseRateBudget(quota=1, window_seconds=60, clock=clock)
        budget.acquire()

        clock.advance(timedelta(seconds=61))
        budget.acquire()

        assert budget.status()['request_count'] == 1

    def test_release(self, app):
        clock = FakeClock(datetime(2026, 1, 1, 12, 0, 0))
        budget = DatabaseRateBudget(quota=1, window_seconds=60, clock=clock)
        budget.acquire()
        budget.release()
        assert budget.status()['remaining_requests'] == 1


def test_build_rate_budget_selects_backend():
    config = {'RATE_BUDGET_QUOTA': 10, 'RATE_BUDGET_WINDOW': 60}
    assert isinstance(build_rate_budget(dict(config, RATE_BUDGET_BACKEND='memory')), MemoryRateBudget)
    assert isinstance(build_rate_budget(dict(config, RATE_BUDGET_BACKEND='database')), DatabaseRateBudget)
    with pytest.raises(ValueError):
        build_rate_budget(dict(config, RATE_BUDGET_BACKEND='redis'))
