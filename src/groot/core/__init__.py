"""Core engine layer for Groot.

This module provides the staging index, the commit chain, history walking
and the repository handle that ties them together.
"""

from groot.core.commits import CommitChain
from groot.core.head import HeadPointer, MemoryHeadPointer
from groot.core.history import CommitDiff, FileDiff, HistoryEngine
from groot.core.repository import Repository
from groot.core.staging import MemoryStagingIndex, StagingIndex, stage_file

__all__ = [
    "CommitChain",
    "CommitDiff",
    "FileDiff",
    "HeadPointer",
    "HistoryEngine",
    "MemoryHeadPointer",
    "MemoryStagingIndex",
    "Repository",
    "StagingIndex",
    "stage_file",
]
