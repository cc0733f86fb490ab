"""Affinity groups and conflict lookups built from guest relationships."""
from __future__ import annotations

from typing import Dict, Iterable, List, Set

from .models import Constraint, ConstraintKind, Household, SocialCircle


class UnionFind:
    """Disjoint sets over guest ids with path compression and union by rank."""

    def __init__(self, items: Iterable[str] = ()) -> None:
        self.parent: Dict[str, str] = {}
        self.rank: Dict[str, int] = {}
        for item in items:
            self.add(item)

    def __contains__(self, item: str) -> bool:
        return item in self.parent

    def add(self, item: str) -> None:
        if item not in self.parent:
            self.parent[item] = item
            self.rank[item] = 0

    def find(self, x: str) -> str:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: str, b: str) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1

    def groups(self) -> List[List[str]]:
        """Connected components, in the order their first member was added."""
        by_root: Dict[str, List[str]] = {}
        for item in self.parent:
            by_root.setdefault(self.find(item), []).append(item)
        return list(by_root.values())


def build_affinity_groups(
    assignable_ids: Iterable[str],
    households: Iterable[Household],
    constraints: Iterable[Constraint],
) -> List[List[str]]:
    """Partition assignable guests into groups that must share a table.

    Households and must-sit-together constraints are merged. References to
    guests outside ``assignable_ids`` are ignored. Largest groups come first;
    equal sizes keep input order.
    """
    uf = UnionFind(assignable_ids)

    for household in households:
        members = [gid for gid in household.guest_ids if gid in uf]
        for other in members[1:]:
            uf.union(members[0], other)

    for c in constraints:
        if c.kind is not ConstraintKind.MUST_SIT_TOGETHER:
            continue
        a, b = c.guest_ids
        if a in uf and b in uf:
            uf.union(a, b)

    # sorted() is stable, so ties stay in first-seen order
    return sorted(uf.groups(), key=len, reverse=True)


def build_conflict_index(constraints: Iterable[Constraint]) -> Dict[str, Set[str]]:
    """Symmetric map of guest id to the ids it must never share a table with."""
    conflicts: Dict[str, Set[str]] = {}
    for c in constraints:
        if c.kind is not ConstraintKind.MUST_NOT_SIT_TOGETHER:
            continue
        a, b = c.guest_ids
        conflicts.setdefault(a, set()).add(b)
        conflicts.setdefault(b, set()).add(a)
    return conflicts


def build_circle_index(social_circles: Iterable[SocialCircle]) -> Dict[str, Set[str]]:
    """Map each guest id to everyone sharing at least one social circle with it."""
    friends: Dict[str, Set[str]] = {}
    for circle in social_circles:
        for gid in circle.guest_ids:
            mates = friends.setdefault(gid, set())
            mates.update(other for other in circle.guest_ids if other != gid)
    return friends


def has_internal_conflict(group: Iterable[str], conflicts: Dict[str, Set[str]]) -> bool:
    members = list(group)
    member_set = set(members)
    return any(conflicts.get(gid, set()) & member_set for gid in members)
