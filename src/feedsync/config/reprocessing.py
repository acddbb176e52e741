"""Batching defaults for bulk reprocessing."""

from __future__ import annotations

from dataclasses import dataclass

from feedsync.domain.reprocessing import DEFAULT_BATCH_SIZE, DEFAULT_MAX_WORKERS

from .env import positive_int_env


@dataclass(frozen=True, slots=True)
class ReprocessingConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS


def get_reprocessing_config() -> ReprocessingConfig:
    return ReprocessingConfig(
        batch_size=positive_int_env("FEEDSYNC_REPROCESS_BATCH_SIZE", DEFAULT_BATCH_SIZE),
        max_workers=positive_int_env("FEEDSYNC_REPROCESS_MAX_WORKERS", DEFAULT_MAX_WORKERS),
    )
