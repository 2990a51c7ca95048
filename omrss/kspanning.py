"""K spanning trees derived from a Steiner tree by swapping cycle edges."""

from __future__ import annotations

import enum
import secrets
from collections import defaultdict
from typing import Sequence

from omrss.dijkstra import V2V
from omrss.tree import KTrees, Tree

ARITHMETIC_STEP = 2


class SelectionMethod(enum.IntEnum):
    """How K candidates are chosen from all trees found."""

    MIN_WEIGHT = 0
    INCREASING_SEQUENCE = 1
    AVERAGE_SEQUENCE = 2


def k_spanning_tree(
    v2v: V2V,
    steiner: Tree,
    k: int,
    source: int,
    destinations: Sequence[int],
    cost: float,
    method: int,
) -> KTrees:
    """Up to ``k`` trees: the Steiner tree first, then chosen alternatives."""
    selected = KTrees()
    candidates = KTrees()

    mst = steiner
    mst.weight = len(steiner.nodes) - 1
    selected.trees.append(mst)

    terminals = [source, *destinations]
    for terminal in terminals:
        v2v_edge, _ = v2v.get_edge(terminal)
        for other in terminals:
            if terminal == other:
                continue
            for path in v2v_edge.paths_to(other):
                grown = mst.deep_copy()
                grown.into_tree(path, cost)
                cycle = grown.find_cycle()
                if cycle:
                    trimmed = grown.deep_copy()
                    feedback = trimmed.feedback_edge_set(cycle, path)
                    traverse_mst(trimmed, candidates, feedback, path, terminals, cost, k)

    if method == SelectionMethod.MIN_WEIGHT:
        select_min_weight(selected, candidates, k)
    elif method == SelectionMethod.INCREASING_SEQUENCE:
        select_increasing_sequence(selected, candidates, k)
    else:
        select_average_sequence(selected, candidates, k)
    print(f"list_of_trees: {len(candidates.trees)}")
    return selected


def _restore(target: Tree, snapshot: Tree) -> None:
    fresh = snapshot.deep_copy()
    target.nodes = fresh.nodes
    target.weight = fresh.weight


def traverse_mst(
    mst: Tree,
    list_of_trees: KTrees,
    feedback: Sequence[Sequence[int]],
    path: Sequence[int],
    terminals: Sequence[int],
    cost: float,
    k: int,
) -> None:
    """Remove feedback edges depth first and collect every tree that results."""
    snapshot = mst.deep_copy()
    for edge in feedback:
        if mst.node_by_id(edge[0]) is None or mst.node_by_id(edge[1]) is None:
            continue
        mst.remove_edge(edge)
        cycle = mst.find_cycle()
        if cycle:
            before = len(list_of_trees.trees)
            deeper = mst.feedback_edge_set(cycle, path)
            traverse_mst(mst, list_of_trees, deeper, path, terminals, cost, k)
            if before < len(list_of_trees.trees):
                _restore(mst, snapshot)
            else:
                for removed in deeper:
                    mst.into_tree(list(removed), cost)
        elif mst.nodes and mst.is_tree(terminals):
            mst.weight = len(mst.nodes) - 1
            add_to_list(list_of_trees, mst, k)
            _restore(mst, snapshot)


def add_to_list(list_of_trees: KTrees, tree: Tree, k: int) -> None:
    """Add a copy of ``tree`` unless an equal tree is listed; keep the list sorted by weight."""
    candidate = tree.deep_copy()
    if not in_list(list_of_trees, candidate):
        list_of_trees.trees.append(candidate)
    list_of_trees.trees.sort(key=lambda item: item.weight)


def in_list(list_of_trees: KTrees, tree: Tree) -> bool:
    """Whether an equal tree is already listed."""
    return any(listed.same_as(tree) for listed in list_of_trees.trees)


def select_min_weight(selected: KTrees, candidates: KTrees, k: int) -> None:
    """Fill up to ``k`` trees with the lightest candidates, breaking ties at random."""
    if len(candidates.trees) < k:
        selected.trees.extend(candidates.trees)
        return

    by_weight: dict[int, list[Tree]] = defaultdict(list)
    for tree in candidates.trees:
        by_weight[tree.weight].append(tree)
    weight = candidates.trees[0].weight
    heaviest = max(by_weight)

    while len(selected.trees) < k and weight <= heaviest:
        needed = k - len(selected.trees)
        group = list(by_weight.get(weight, []))
        if group:
            if len(group) <= needed:
                selected.trees.extend(group)
            else:
                selected.trees.extend(
                    group.pop(secrets.randbelow(len(group))) for _ in range(needed)
                )
        weight += 1


def select_increasing_sequence(selected: KTrees, candidates: KTrees, k: int) -> None:
    """Take every second candidate from the lightest, ``k - 1`` of them."""
    trees = candidates.trees
    if len(trees) < k:
        selected.trees.extend(trees)
    elif len(trees) >= ARITHMETIC_STEP * (k - 1):
        selected.trees.extend(trees[0:ARITHMETIC_STEP * (k - 1):ARITHMETIC_STEP])
    else:
        selected.trees.extend(trees[:k - 1])


def select_average_sequence(selected: KTrees, candidates: KTrees, k: int) -> None:
    """Take candidates spread evenly across the whole list."""
    trees = candidates.trees
    if len(trees) < k:
        selected.trees.extend(trees)
        return
    if k < 2:
        raise ValueError("average sequence selection needs k of at least 2")
    step = int(len(trees) / (k - 1))
    selected.trees.extend(trees[::step])