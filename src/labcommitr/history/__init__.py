"""Commit history browsing (``lab preview``) and reverting (``lab revert``)."""

from __future__ import annotations

from labcommitr.history.pager import CommitPager, clamp_limit
from labcommitr.history.preview import PreviewOptions, run_preview
from labcommitr.history.revert import RevertOptions, revert_commit, run_revert

__all__ = [
    "CommitPager",
    "PreviewOptions",
    "RevertOptions",
    "clamp_limit",
    "revert_commit",
    "run_preview",
    "run_revert",
]
