"""Service orchestration layer: coordinates long-running inference jobs.

Modules:
- submitter: job creation with a single fallback submission.
- poller: fixed-interval, bounded status polling with cancel on timeout.
- postprocess: pure transforms of a succeeded job's output.
- runner: the reusable submit -> poll -> post-process primitive.
- catalog: per-endpoint job definitions.
"""
