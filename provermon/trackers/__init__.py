"""State trackers — each derives one part of the dashboard snapshot.

Modules
-------
current_task
    ``extract_current_task`` finds the task most recently announced.
throughput
    ``ThroughputReducer`` folds events into fetch/prove/submit totals.
backoff
    ``track_backoff`` times the active rate-limit period.
fetching
    ``FetchActivityMachine`` tracks whether a task request is outstanding.
prover_state
    ``latest_prover_state`` surfaces the last explicit prover state.
"""
