"""History walking and per-commit diffs.

The engine only reads from the commit chain and the object store; it never
mutates repository state.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set, Tuple

from groot.core.commits import CommitChain
from groot.diff.lines import UNCHANGED, LineSegment, diff_lines
from groot.errors import CommitNotFoundError
from groot.models import Commit

logger = logging.getLogger(__name__)

# FileDiff.status values
STATUS_INITIAL = "initial"      # file of a root commit, nothing to compare with
STATUS_NEW = "new"              # parent has no entry for the path
STATUS_MODIFIED = "modified"
STATUS_UNCHANGED = "unchanged"


@dataclass(frozen=True)
class FileDiff:
    """Diff of one file entry of a commit against its parent.

    Attributes:
        path: Path of the entry
        content_id: Object id of the entry's content
        content: Entry content decoded as text
        status: One of initial, new, modified, unchanged
        parent_content_id: Content id of the matching parent entry, if any
        segments: Line segments; empty unless the parent has the path
    """

    path: str
    content_id: str
    content: str
    status: str
    parent_content_id: Optional[str] = None
    segments: Tuple[LineSegment, ...] = ()

    @property
    def has_diff(self) -> bool:
        return self.status in (STATUS_MODIFIED, STATUS_UNCHANGED)


@dataclass(frozen=True)
class CommitDiff:
    """Per-file report for one commit, in the commit's file order."""

    commit: Commit
    files: List[FileDiff] = field(default_factory=list)


def decode_text(content: bytes) -> str:
    """Decode object content for display; undecodable bytes are replaced."""
    return content.decode("utf-8", errors="replace")


class HistoryEngine:
    """Walks the commit chain and computes commit diffs.

    Attributes:
        chain: Commit chain to read commits from
    """

    def __init__(self, chain: CommitChain) -> None:
        self.chain = chain

    def history(self) -> Iterator[Commit]:
        """Yield commits from the current head back to the root.

        The head is read when iteration starts, so each call walks the chain
        as it is at that moment. An empty repository yields nothing.

        Raises:
            CommitNotFoundError: If a parent link is broken or loops back
        """
        seen: Set[str] = set()
        commit_id = self.chain.current_head()

        while commit_id is not None:
            if commit_id in seen:
                logger.warning("Commit chain loops back to %s", commit_id)
                raise CommitNotFoundError(f"Commit chain is corrupted at {commit_id}")
            seen.add(commit_id)

            commit = self.chain.load(commit_id)
            yield commit
            commit_id = commit.parent

    def diff(self, commit_id: str) -> CommitDiff:
        """Compare every file of a commit with the same path in its parent.

        Args:
            commit_id: Full id of the commit to show

        Returns:
            CommitDiff with one FileDiff per file entry

        Raises:
            CommitNotFoundError: If the commit or its parent is missing
        """
        commit = self.chain.load(commit_id)
        parent = self.chain.load(commit.parent) if commit.parent else None

        report = CommitDiff(commit=commit)
        for entry in commit.files:
            content = decode_text(self.chain.objects.get(entry.content_id))

            if parent is None:
                report.files.append(FileDiff(
                    path=entry.path,
                    content_id=entry.content_id,
                    content=content,
                    status=STATUS_INITIAL,
                ))
                continue

            # First match wins when the parent staged a path more than once
            parent_entry = parent.find_file(entry.path)
            if parent_entry is None:
                report.files.append(FileDiff(
                    path=entry.path,
                    content_id=entry.content_id,
                    content=content,
                    status=STATUS_NEW,
                ))
                continue

            parent_content = decode_text(self.chain.objects.get(parent_entry.content_id))
            segments = tuple(diff_lines(parent_content, content))
            unchanged = all(s.tag == UNCHANGED for s in segments)

            report.files.append(FileDiff(
                path=entry.path,
                content_id=entry.content_id,
                content=content,
                status=STATUS_UNCHANGED if unchanged else STATUS_MODIFIED,
                parent_content_id=parent_entry.content_id,
                segments=segments,
            ))

        logger.debug("Diffed commit %s: %d file(s)", commit.id[:8], len(report.files))
        return report
