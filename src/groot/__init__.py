"""Groot - a minimal local version-control core.

Groot stores file content in a content-addressable object store, stages
files in an ordered index, seals snapshots into an immutable commit chain and
shows line-level diffs between a commit and its parent.
"""

__version__ = "0.1.0"
__author__ = "Groot Contributors"

__all__ = ["__version__", "__author__"]
