"""Tests for the throughput/runtime reducer."""

from __future__ import annotations

from provermon.core.event_log import EventLog
from provermon.models.events import EventType, ProofSubmitted
from provermon.models.metrics import TaskStatus
from provermon.trackers.throughput import (
    ThroughputReducer,
    ThroughputState,
    fold_event,
    fold_events,
)

SUBMITTED = "Step 4 of 4: Proof submitted successfully for Task-1"
PROVING = "Step 2 of 4: Proving task Task-1"
GENERATED = "Step 3 of 4: Proof generated for task Task-1"


class TestFoldEvent:
    def test_initial_metrics(self):
        metrics = ThroughputState().to_metrics()
        assert metrics.tasks_executed == 0
        assert metrics.last_status == TaskStatus.NONE

    def test_three_submissions_give_900_points(self, submitter_event):
        state = fold_events(ThroughputState(), [submitter_event(SUBMITTED) for _ in range(3)])
        metrics = state.to_metrics()
        assert metrics.total_points == 900
        assert metrics.tasks_proved == 3
        assert metrics.last_status == TaskStatus.SUCCESS

    def test_points_per_submission_is_configurable(self, submitter_event):
        state = fold_event(ThroughputState(), submitter_event(SUBMITTED))
        assert state.to_metrics(points_per_submission=50).total_points == 50

    def test_fetch_counting_excludes_progress_markers(self, fetcher_event):
        events = [
            fetcher_event("Step 1 of 4: Requesting task...", EventType.SUCCESS),
            fetcher_event("rate limited, retrying", EventType.SUCCESS),
            fetcher_event("retrying request", EventType.SUCCESS),
            fetcher_event("Got Task-1", EventType.SUCCESS),
            fetcher_event("Got Task-2", EventType.SUCCESS),
            fetcher_event("fetch failed", EventType.ERROR),
        ]
        state = fold_events(ThroughputState(), events)
        assert state.fetched == 2
        assert state.to_metrics().tasks_executed == 2

    def test_fetch_announcing_backoff_is_counted(self, fetcher_event):
        event = fetcher_event("Fetched task, ready for next task (30)", EventType.SUCCESS)
        assert fold_event(ThroughputState(), event).fetched == 1

    def test_tasks_executed_is_max_of_fetched_and_submitted(
        self, fetcher_event, submitter_event
    ):
        events = [fetcher_event("Got Task-1", EventType.SUCCESS)] + [
            submitter_event(SUBMITTED) for _ in range(3)
        ]
        metrics = fold_events(ThroughputState(), events).to_metrics()
        assert metrics.tasks_executed == 3
        assert metrics.tasks_proved == 3

    def test_proving_duration_uses_event_timestamps(self, prover_event):
        state = fold_events(
            ThroughputState(),
            [prover_event(PROVING, at=10.0), prover_event(GENERATED, at=52.5)],
        )
        assert state.accumulated_runtime == 42.5
        assert state.proving_started_at is None
        assert state.last_status == TaskStatus.PROVED

    def test_runtime_accumulates_across_tasks(self, prover_event):
        events = [
            prover_event(PROVING, at=0.0),
            prover_event(GENERATED, at=10.0),
            prover_event(PROVING, at=20.0),
            prover_event(GENERATED, at=25.0),
        ]
        assert fold_events(ThroughputState(), events).accumulated_runtime == 15.0

    def test_generated_without_start_adds_nothing(self, prover_event):
        state = fold_event(ThroughputState(), prover_event(GENERATED, at=5.0))
        assert state.accumulated_runtime == 0.0
        assert state.last_status == TaskStatus.PROVED

    def test_out_of_order_timestamps_never_subtract(self, prover_event):
        state = fold_events(
            ThroughputState(accumulated_runtime=7.0),
            [prover_event(PROVING, at=30.0), prover_event(GENERATED, at=20.0)],
        )
        assert state.accumulated_runtime == 7.0

    def test_prover_error_keeps_timer(self, prover_event):
        state = fold_events(
            ThroughputState(),
            [prover_event(PROVING, at=0.0), prover_event("crash", EventType.ERROR, at=1.0)],
        )
        assert state.last_status == TaskStatus.PROOF_FAILED
        assert state.proving_started_at is not None

        state = fold_event(state, prover_event(GENERATED, at=4.0))
        assert state.accumulated_runtime == 4.0

    def test_submit_failure_status(self, submitter_event):
        state = fold_event(ThroughputState(), submitter_event("nope", EventType.ERROR))
        assert state.last_status == TaskStatus.SUBMIT_FAILED
        assert state.submitted == 0

    def test_last_submission_timestamp(self, submitter_event):
        first = submitter_event(SUBMITTED, at=1.0)
        second = submitter_event(SUBMITTED, at=9.0)
        state = fold_events(ThroughputState(), [first, second])
        assert state.last_submission_timestamp == second.timestamp

    def test_structured_submission(self, submitter_event):
        event = submitter_event("", payload=ProofSubmitted(task_id="Task-9"))
        assert fold_event(ThroughputState(), event).submitted == 1

    def test_unrecognized_message_is_noop(self, fetcher_event):
        state = ThroughputState(fetched=4)
        assert fold_event(state, fetcher_event("garbage")) == state


class TestThroughputReducer:
    def test_each_event_folded_once(self, log: EventLog, submitter_event):
        reducer = ThroughputReducer()
        log.append(submitter_event(SUBMITTED))
        reducer.advance(log)
        reducer.advance(log)
        assert reducer.state.submitted == 1

        log.append(submitter_event(SUBMITTED))
        assert reducer.advance(log).submitted == 2
        assert reducer.cursor == 2

    def test_totals_survive_eviction(self, submitter_event):
        log = EventLog(max_events=2)
        reducer = ThroughputReducer()
        for _ in range(5):
            log.append(submitter_event(SUBMITTED))
            reducer.advance(log)
        assert reducer.state.submitted == 5
        assert len(log) == 2

    def test_matches_full_recompute(self, log: EventLog, prover_event, submitter_event):
        events = [
            prover_event(PROVING, at=0.0),
            prover_event(GENERATED, at=3.0),
            submitter_event(SUBMITTED, at=4.0),
        ]
        reducer = ThroughputReducer()
        for event in events:
            log.append(event)
            reducer.advance(log)
        assert reducer.state == fold_events(ThroughputState(), log)
