"""
Tests unitarios para el orquestador de sincronizacion (SyncUseCases).

Store y feed se mockean; se verifica la maquina de estados, las condiciones
de publicacion y la conversion de errores en un SyncOutcome FAILED.
"""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest

from alerts_sync.application.use_cases.sync_use_cases import (
    SyncState,
    SyncUseCases,
    build_commit_message,
)
from alerts_sync.domain.entities.alert import AlertRecord, Dataset
from alerts_sync.domain.entities.working_copy import WorkingCopy
from alerts_sync.domain.repositories.alert_feed import IFeedClient
from alerts_sync.domain.repositories.dataset_store import IDatasetStore
from alerts_sync.infrastructure.locks.sync_lock import SyncLockManager
from alerts_sync.shared.exceptions.sync import (
    FetchFailed,
    PublishRejected,
    SyncConflict,
    SyncInProgress,
    UnparseableTimestamp,
)


HEADER = ["rid", "date", "time"]


def _record(rid, date="01.01.2024", time="10:00:00") -> AlertRecord:
    return AlertRecord.from_mapping({"rid": str(rid), "date": date, "time": time})


class TestBuildCommitMessage:
    def test_singular(self) -> None:
        assert build_commit_message(1) == "Added 1 alert"

    @pytest.mark.parametrize("count", [2, 17, 1000])
    def test_plural(self, count: int) -> None:
        assert build_commit_message(count) == f"Added {count} alerts"


class TestSyncUseCasesRun:
    @pytest.fixture
    def working_copy(self, tmp_path: Path) -> WorkingCopy:
        return WorkingCopy(path=tmp_path, dataset_path=tmp_path / "israel-alerts.csv")

    @pytest.fixture
    def store(self, working_copy: WorkingCopy) -> Mock:
        store = Mock(spec=IDatasetStore)
        store.ensure.return_value = working_copy
        store.load.return_value = Dataset(fieldnames=list(HEADER), records=[_record(1)])
        return store

    @pytest.fixture
    def feed(self) -> Mock:
        feed = Mock(spec=IFeedClient)
        feed.fetch.return_value = []
        return feed

    @pytest.fixture
    def use_cases(self, store: Mock, feed: Mock, sync_config) -> SyncUseCases:
        return SyncUseCases(store=store, feed=feed, config=sync_config)

    def test_end_to_end_adds_one_alert(self, use_cases, store, feed, working_copy) -> None:
        feed.fetch.return_value = [_record(1), _record(2, time="10:05:00")]

        outcome = use_cases.run()

        assert outcome.succeeded
        assert outcome.state == SyncState.DONE
        assert outcome.added_count == 1
        assert outcome.known_count == 1
        assert outcome.fetched_count == 2
        assert outcome.merged_count == 2
        assert outcome.commit_message == "Added 1 alert"
        assert outcome.published is True

        store.publish.assert_called_once()
        published_copy, merged, message = store.publish.call_args.args
        assert published_copy is working_copy
        assert merged.ids() == ["1", "2"]
        assert merged.fieldnames == HEADER
        assert message == "Added 1 alert"

    def test_fetch_uses_watermark_of_last_record(self, use_cases, feed) -> None:
        use_cases.run()

        feed.fetch.assert_called_once_with(datetime(2024, 1, 1, 10, 0, 1, tzinfo=timezone.utc))

    def test_empty_dataset_fetches_everything(self, use_cases, store, feed) -> None:
        store.load.return_value = Dataset()
        feed.fetch.return_value = [_record(3), _record(1), _record(2)]

        outcome = use_cases.run()

        feed.fetch.assert_called_once_with(None)
        assert outcome.watermark is None
        assert outcome.added_count == 3
        assert store.publish.call_args.args[2] == "Added 3 alerts"

    def test_nothing_fetched_does_not_publish(self, use_cases, store) -> None:
        outcome = use_cases.run()

        assert outcome.succeeded
        assert outcome.added_count == 0
        assert outcome.published is False
        assert outcome.commit_message is None
        store.publish.assert_not_called()

    def test_only_overwrites_do_not_publish(self, use_cases, store, feed) -> None:
        feed.fetch.return_value = [_record(1, time="10:00:30")]

        outcome = use_cases.run()

        assert outcome.succeeded
        assert outcome.fetched_count == 1
        assert outcome.added_count == 0
        store.publish.assert_not_called()

    def test_store_conflict_fails_before_fetch(self, use_cases, store, feed) -> None:
        store.ensure.side_effect = SyncConflict("/tmp/wc", "not possible to fast-forward")

        outcome = use_cases.run()

        assert outcome.state == SyncState.FAILED
        assert outcome.failed_state == SyncState.ENSURE_STORE
        assert isinstance(outcome.error, SyncConflict)
        store.load.assert_not_called()
        feed.fetch.assert_not_called()

    def test_corrupt_last_timestamp_fails_run(self, use_cases, store, feed) -> None:
        store.load.return_value = Dataset(
            fieldnames=list(HEADER), records=[_record(1), _record(2, date="2024/01/01")]
        )

        outcome = use_cases.run()

        assert outcome.failed_state == SyncState.RESOLVE_WATERMARK
        assert isinstance(outcome.error, UnparseableTimestamp)
        feed.fetch.assert_not_called()
        store.publish.assert_not_called()

    def test_fetch_failure_fails_run(self, use_cases, store, feed) -> None:
        feed.fetch.side_effect = FetchFailed("timeout")

        outcome = use_cases.run()

        assert outcome.failed_state == SyncState.FETCH
        assert outcome.error.error_code == "FETCH_FAILED"
        store.publish.assert_not_called()

    def test_publish_rejected_fails_run(self, use_cases, store, feed) -> None:
        feed.fetch.return_value = [_record(2)]
        store.publish.side_effect = PublishRejected("origin", "non-fast-forward")

        outcome = use_cases.run()

        assert outcome.state == SyncState.FAILED
        assert outcome.failed_state == SyncState.PUBLISH
        assert outcome.published is False
        assert outcome.added_count == 1

    def test_busy_location_fails_with_sync_in_progress(self, use_cases, store, sync_config) -> None:
        with SyncLockManager.hold(sync_config.working_dir, timeout=1.0):
            outcome = use_cases.run()

        assert outcome.state == SyncState.FAILED
        assert outcome.failed_state == SyncState.START
        assert isinstance(outcome.error, SyncInProgress)
        store.ensure.assert_not_called()

    def test_lock_released_after_run(self, use_cases, sync_config) -> None:
        use_cases.run()

        assert not SyncLockManager.is_locked(sync_config.working_dir)

    def test_unexpected_errors_propagate(self, use_cases, store) -> None:
        store.load.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            use_cases.run()

        assert not SyncLockManager.is_locked(use_cases._config.working_dir)

    def test_rerun_after_publish_is_noop(self, use_cases, store, feed) -> None:
        feed.fetch.return_value = [_record(1), _record(2)]
        first = use_cases.run()
        merged = store.publish.call_args.args[1]

        store.load.return_value = merged
        store.publish.reset_mock()
        second = use_cases.run()

        assert first.added_count == 1
        assert second.added_count == 0
        store.publish.assert_not_called()
