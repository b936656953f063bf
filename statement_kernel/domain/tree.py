"""
Account hierarchy reconstruction (``statement_kernel.domain.tree``).

Responsibility
--------------
Turns a flat list of ``AccountRecord`` into rooted forests, one per
account-type bucket.  Nodes live in an arena (a tuple addressed by integer
index) and reference their parent and children by index, so the result is an
immutable snapshot that can be shared with any renderer.

Invariants enforced
-------------------
* ``len(forest.flatten()) == len(records)`` for every successfully built
  bucket; the multiset of ids is preserved.
* Children keep input order; roots keep first-seen input order.
* The parent chain is acyclic.  A self-parent or any longer loop raises
  ``CyclicHierarchyError`` instead of recursing.

Failure modes
-------------
* Repeated id within a batch -> ``DuplicateIdError``.
* Parent-chain loop -> ``CyclicHierarchyError``.
* ``build_forests`` captures both per bucket in ``ForestSet.failures`` so one
  malformed bucket never hides the others.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.exceptions import (
    CyclicHierarchyError,
    DuplicateIdError,
    HierarchyError,
)
from statement_kernel.logging_config import get_logger

logger = get_logger("domain.tree")


@dataclass(frozen=True)
class TreeNode:
    """An account record placed in the hierarchy."""

    index: int
    record: AccountRecord
    parent: int | None
    children: tuple[int, ...]
    depth: int

    @property
    def account_id(self) -> str:
        return self.record.account_id

    @property
    def has_children(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True)
class Forest:
    """Root-level account trees for one account-type bucket."""

    account_type: AccountType | None
    nodes: tuple[TreeNode, ...]
    roots: tuple[int, ...]

    @classmethod
    def empty(cls, account_type: AccountType | None = None) -> Forest:
        return cls(account_type=account_type, nodes=(), roots=())

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def root_nodes(self) -> tuple[TreeNode, ...]:
        return tuple(self.nodes[i] for i in self.roots)

    def children_of(self, node: TreeNode) -> tuple[TreeNode, ...]:
        return tuple(self.nodes[i] for i in node.children)

    def node(self, account_id: str) -> TreeNode:
        """Look up a node by account id (KeyError when absent)."""
        for n in self.nodes:
            if n.account_id == account_id:
                return n
        raise KeyError(account_id)

    def subtree(self, node: TreeNode) -> Iterator[TreeNode]:
        """Yield ``node`` and all of its descendants, pre-order."""
        stack = [node.index]
        while stack:
            current = self.nodes[stack.pop()]
            yield current
            stack.extend(reversed(current.children))

    def walk(self) -> Iterator[TreeNode]:
        """Depth-first pre-order traversal of every root."""
        for root in self.roots:
            yield from self.subtree(self.nodes[root])

    def flatten(self) -> tuple[TreeNode, ...]:
        return tuple(self.walk())


@dataclass(frozen=True)
class BucketFailure:
    """A structural error that aborted one bucket's forest."""

    account_type: AccountType
    error: HierarchyError


@dataclass(frozen=True)
class ForestSet:
    """Forests for every bucket present in a record batch."""

    forests: tuple[tuple[AccountType, Forest], ...]
    failures: tuple[BucketFailure, ...] = ()

    def forest(self, account_type: AccountType) -> Forest:
        """Forest for a bucket; empty when the bucket is absent or failed."""
        for bucket, forest in self.forests:
            if bucket == account_type:
                return forest
        return Forest.empty(account_type)

    def failures_for(self, *account_types: AccountType) -> tuple[BucketFailure, ...]:
        wanted = set(account_types)
        return tuple(f for f in self.failures if f.account_type in wanted)


# =========================================================================
# Builders
# =========================================================================


def _detect_cycles(
    parents: Sequence[int | None],
    records: Sequence[AccountRecord],
) -> list[int]:
    """
    Compute each node's depth, failing on the first parent-chain loop.

    Walks up from every node until reaching a node whose depth is already
    known (or a root).  The current path is the visited set: meeting a node
    already on it means the chain loops.
    """
    depths: list[int | None] = [None] * len(parents)
    for start in range(len(parents)):
        path: list[int] = []
        on_path: set[int] = set()
        current: int | None = start
        while current is not None and depths[current] is None:
            if current in on_path:
                loop = path[path.index(current):] + [current]
                ids = tuple(records[i].account_id for i in loop)
                raise CyclicHierarchyError(records[current].account_id, ids)
            path.append(current)
            on_path.add(current)
            current = parents[current]

        base = -1 if current is None else depths[current]
        for offset, idx in enumerate(reversed(path), start=1):
            depths[idx] = base + offset
    return depths  # type: ignore[return-value]


def build_forest(
    records: Iterable[AccountRecord],
    account_type: AccountType | None = None,
) -> Forest:
    """
    Build a forest from records of a single bucket.

    1. Index every record by id (duplicate -> ``DuplicateIdError``).
    2. Attach each record to its parent when ``parent_id`` is in the index,
       otherwise make it a root.  A parent outside the given records, or one
       of a different account type, counts as absent.
    3. Reject parent-chain loops (``CyclicHierarchyError``).
    """
    batch = list(records)

    index: dict[str, int] = {}
    for i, rec in enumerate(batch):
        if rec.account_id in index:
            raise DuplicateIdError(rec.account_id)
        index[rec.account_id] = i

    parents: list[int | None] = []
    children: list[list[int]] = [[] for _ in batch]
    roots: list[int] = []
    for i, rec in enumerate(batch):
        parent = index.get(rec.parent_id) if rec.parent_id is not None else None
        if parent is not None and batch[parent].account_type != rec.account_type:
            parent = None
        parents.append(parent)
        if parent is None:
            roots.append(i)
        else:
            children[parent].append(i)

    depths = _detect_cycles(parents, batch)

    nodes = tuple(
        TreeNode(
            index=i,
            record=rec,
            parent=parents[i],
            children=tuple(children[i]),
            depth=depths[i],
        )
        for i, rec in enumerate(batch)
    )

    logger.debug(
        "forest_built",
        extra={
            "account_type": account_type.value if account_type else None,
            "node_count": len(nodes),
            "root_count": len(roots),
        },
    )
    return Forest(account_type=account_type, nodes=nodes, roots=tuple(roots))


def build_forests(records: Iterable[AccountRecord]) -> ForestSet:
    """
    Group records by account type and build one forest per bucket.

    A structural error aborts only its own bucket; it is captured as a
    ``BucketFailure`` and the bucket reads as empty.
    """
    buckets: dict[AccountType, list[AccountRecord]] = {}
    for rec in records:
        buckets.setdefault(rec.account_type, []).append(rec)

    forests: list[tuple[AccountType, Forest]] = []
    failures: list[BucketFailure] = []
    for account_type, bucket in buckets.items():
        try:
            forests.append((account_type, build_forest(bucket, account_type)))
        except HierarchyError as exc:
            logger.warning(
                "bucket_build_failed",
                extra={"account_type": account_type.value, "error_code": exc.code},
                exc_info=True,
            )
            failures.append(BucketFailure(account_type=account_type, error=exc))

    return ForestSet(forests=tuple(forests), failures=tuple(failures))
