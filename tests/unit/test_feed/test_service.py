"""Unit tests for the feed service."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from daily_feed import __version__
from daily_feed.config.models import PipelineConfig
from daily_feed.feed import (
    FeedService,
    FeedStats,
    InvalidDateError,
    RefreshIncompleteError,
)
from daily_feed.ingest import IngestResult
from daily_feed.store.models import ItemStatus
from tests.helpers.fakes import MemoryStore, RecordingSleep, make_state
from tests.helpers.time import FIXED_DATE, fixed_clock


class ScriptedRunner:
    """Refresh runner that writes scripted records into a store."""

    def __init__(self, store: MemoryStore, complete: bool = True, failed: int = 0) -> None:
        self._store = store
        self._complete = complete
        self._failed = failed
        self.calls: list[tuple[int | None, bool]] = []

    async def __call__(self, limit: int | None, force: bool) -> IngestResult:
        self.calls.append((limit, force))
        status = ItemStatus.OK if self._complete else ItemStatus.ERROR
        for hn_id in (1, 2):
            await self._store.upsert(make_state(hn_id, FIXED_DATE, status=status))
        errors = [f"Story {i} failed" for i in range(self._failed)]
        return IngestResult(
            date=FIXED_DATE,
            ingested=2 - self._failed,
            failed=self._failed,
            errors=errors,
        )


def _service(
    store: MemoryStore,
    runner: ScriptedRunner | None = None,
    sleep: RecordingSleep | None = None,
) -> FeedService:
    return FeedService(
        store,
        PipelineConfig(),
        runner=runner or ScriptedRunner(store),
        sleep=sleep or RecordingSleep(),
        clock=fixed_clock,
    )


class TestGetFeed:
    """Tests for reading a day's feed."""

    def test_invalid_date_rejected(self) -> None:
        """Malformed dates raise InvalidDateError."""
        service = _service(MemoryStore())

        with pytest.raises(InvalidDateError):
            asyncio.run(service.get_feed("2024/03/01"))

    def test_items_sorted_by_score(self) -> None:
        """Highest score first, unscored records last."""
        store = MemoryStore()
        store.records = {
            (FIXED_DATE, 1): make_state(1, FIXED_DATE, score=50),
            (FIXED_DATE, 2): make_state(2, FIXED_DATE, status=ItemStatus.ERROR),
            (FIXED_DATE, 3): make_state(3, FIXED_DATE, score=90),
            ("2024-02-29", 4): make_state(4, "2024-02-29", score=99),
        }

        feed = asyncio.run(_service(store).get_feed(FIXED_DATE))

        assert feed.date == FIXED_DATE
        assert feed.count == 3
        assert [item.hn_id for item in feed.items] == [3, 1, 2]
        assert feed.items[2].error_reason is not None

    def test_empty_day(self) -> None:
        """A day without records is an empty feed."""
        feed = asyncio.run(_service(MemoryStore()).get_feed("2020-01-01"))

        assert feed.count == 0
        assert feed.items == []

    def test_get_today_uses_configured_timezone(self) -> None:
        """Today is computed in Asia/Shanghai by default."""
        store = MemoryStore()
        store.records = {(FIXED_DATE, 1): make_state(1, FIXED_DATE)}

        feed = asyncio.run(_service(store).get_today())

        assert feed.date == FIXED_DATE
        assert feed.count == 1


class TestHealthAndRefresh:
    """Tests for health and single refresh."""

    def test_health(self) -> None:
        """Health reports the package version and a timestamp."""
        health = _service(MemoryStore()).health()

        assert health.version == __version__
        assert health.timestamp

    def test_refresh_ok(self) -> None:
        """A refresh without failures is ok."""
        store = MemoryStore()
        runner = ScriptedRunner(store)

        response = asyncio.run(_service(store, runner).refresh(limit=10, force=True))

        assert response.ok
        assert (response.date, response.ingested, response.failed) == (FIXED_DATE, 2, 0)
        assert runner.calls == [(10, True)]

    def test_refresh_passes_defaults_to_runner(self) -> None:
        """Refresh forwards limit and force to the runner unchanged."""
        runner = AsyncMock(return_value=IngestResult(date=FIXED_DATE, ingested=1))
        service = FeedService(
            MemoryStore(), PipelineConfig(), runner=runner, clock=fixed_clock
        )

        response = asyncio.run(service.refresh())

        runner.assert_awaited_once_with(None, False)
        assert response.ingested == 1

    def test_refresh_with_failures(self) -> None:
        """Any failed item makes the refresh not ok."""
        store = MemoryStore()

        response = asyncio.run(
            _service(store, ScriptedRunner(store, failed=1)).refresh()
        )

        assert not response.ok
        assert response.failed == 1
        assert response.errors == ["Story 0 failed"]


class TestFeedStats:
    """Tests for completion counting."""

    def test_counts(self) -> None:
        """Incomplete ok records count as ok but not complete."""
        store = MemoryStore()
        store.records = {
            (FIXED_DATE, 1): make_state(1, FIXED_DATE),
            (FIXED_DATE, 2): make_state(2, FIXED_DATE, recommend_reason=""),
            (FIXED_DATE, 3): make_state(3, FIXED_DATE, status=ItemStatus.ERROR),
        }

        stats = asyncio.run(_service(store).get_stats(FIXED_DATE))

        assert stats == FeedStats(total=3, ok=2, complete=1, errors=1)
        assert not stats.is_complete

    def test_empty_day_is_not_complete(self) -> None:
        """Zero records never count as complete."""
        assert not FeedStats().is_complete


class TestRefreshUntilComplete:
    """Tests for the refresh-until-complete loop."""

    def test_stops_when_complete(self) -> None:
        """Refreshes once, sleeps once, then sees a complete feed."""
        store = MemoryStore()
        runner = ScriptedRunner(store)
        sleep = RecordingSleep()
        seen: list[tuple[int, FeedStats]] = []

        outcome = asyncio.run(
            _service(store, runner, sleep).refresh_until_complete(
                sleep_seconds=15, on_status=lambda a, s: seen.append((a, s))
            )
        )

        assert outcome.complete
        assert outcome.attempts == 2
        assert outcome.stats.complete == 2
        assert len(runner.calls) == 1
        assert sleep.delays == [15]
        assert [attempt for attempt, _ in seen] == [1, 2]

    def test_already_complete_does_not_refresh(self) -> None:
        """A complete feed needs no refresh."""
        store = MemoryStore()
        store.records = {(FIXED_DATE, 1): make_state(1, FIXED_DATE)}
        runner = ScriptedRunner(store)

        outcome = asyncio.run(_service(store, runner).refresh_until_complete())

        assert outcome.complete
        assert outcome.attempts == 1
        assert runner.calls == []

    def test_dry_run_only_reports(self) -> None:
        """Dry run reports status and never refreshes."""
        store = MemoryStore()
        runner = ScriptedRunner(store)

        outcome = asyncio.run(
            _service(store, runner).refresh_until_complete(dry_run=True)
        )

        assert not outcome.complete
        assert outcome.attempts == 1
        assert runner.calls == []

    def test_raises_after_max_attempts(self) -> None:
        """A feed that never completes raises after the last attempt."""
        store = MemoryStore()
        runner = ScriptedRunner(store, complete=False)
        sleep = RecordingSleep()

        with pytest.raises(RefreshIncompleteError) as exc_info:
            asyncio.run(
                _service(store, runner, sleep).refresh_until_complete(
                    max_attempts=3, sleep_seconds=1, limit=5
                )
            )

        assert exc_info.value.attempts == 3
        assert exc_info.value.total == 2
        assert runner.calls == [(5, False)] * 3
        assert sleep.delays == [1, 1]

    def test_zero_sleep_skips_waiting(self) -> None:
        """sleep_seconds=0 never waits."""
        store = MemoryStore()
        sleep = RecordingSleep()

        asyncio.run(
            _service(store, ScriptedRunner(store), sleep).refresh_until_complete(
                sleep_seconds=0
            )
        )

        assert sleep.delays == []

    @pytest.mark.parametrize(
        ("max_attempts", "sleep_seconds"), [(0, 15), (20, -1)]
    )
    def test_invalid_arguments(self, max_attempts: int, sleep_seconds: float) -> None:
        """Non-positive attempts and negative sleeps are rejected."""
        with pytest.raises(ValueError):
            asyncio.run(
                _service(MemoryStore()).refresh_until_complete(
                    max_attempts=max_attempts, sleep_seconds=sleep_seconds
                )
            )
