"""Sync jobs module."""

from calmirror.jobs.sync_job import run_sync

__all__ = ["run_sync"]
