"""Routing algorithms: Steiner tree, minimal distance tree and ant colony optimisation."""

from __future__ import annotations

import math
import secrets
import time
from dataclasses import dataclass, field

from omrss.dijkstra import V2V
from omrss.flow import TSNFlows
from omrss.kspanning import SelectionMethod
from omrss.network import Network
from omrss.routing import distance_routing, osaco_routing, steiner_routing
from omrss.schedule import objectives, wcd
from omrss.timer import Timer
from omrss.tree import KTrees, KTreesSet, TreesSet

PREFERENCE = 2.0
BACKGROUND_PHEROMONE = 0.5
INPUT_PHEROMONE = 1.0
TIMEOUT_RUNS = 5


def _objective_line(result: list[float]) -> str:
    return f"O1: {result[0]:.6f} O2: {result[1]:.6f} O3: pass O4: {result[3]:.6f} "


def _format_locations(locations: list[list[int]]) -> str:
    inner = ("[" + " ".join(str(value) for value in group) + "]" for group in locations)
    return "[" + " ".join(inner) + "]"


@dataclass
class Visibility:
    """Heuristic desirability of every candidate tree."""

    tsn: list[list[float]] = field(default_factory=list)
    avb: list[list[float]] = field(default_factory=list)


@dataclass
class Pheromone:
    """Pheromone level of every candidate tree."""

    tsn: list[list[float]] = field(default_factory=list)
    avb: list[list[float]] = field(default_factory=list)


@dataclass
class SMT:
    """Steiner minimal tree routing."""

    trees: TreesSet = field(default_factory=TreesSet)
    input_trees: TreesSet = field(default_factory=TreesSet)
    background_trees: TreesSet = field(default_factory=TreesSet)
    objs: list[float] = field(default_factory=lambda: [0.0] * 4)
    timer: Timer = field(default_factory=Timer)
    v2v: V2V | None = None

    def run(self, network: Network) -> None:
        """Route every flow with a Steiner tree."""
        self.trees = steiner_routing(network, self.v2v)


@dataclass
class MDTC:
    """Minimal distance tree construction routing."""

    trees: TreesSet = field(default_factory=TreesSet)
    input_trees: TreesSet = field(default_factory=TreesSet)
    background_trees: TreesSet = field(default_factory=TreesSet)
    objs: list[float] = field(default_factory=lambda: [0.0] * 4)
    timer: Timer = field(default_factory=Timer)

    def run(self, network: Network) -> None:
        """Route every flow with a distance tree, timing the computation."""
        self.timer = Timer()
        self.timer.start()
        self.trees = distance_routing(network)
        self.timer.stop()


@dataclass
class OSACO:
    """Online stream-aware ant colony optimisation over K candidate trees."""

    timeout: int = 200
    k: int = 5
    p: float = 0.6
    method: int = SelectionMethod.MIN_WEIGHT
    ktrees: KTreesSet = field(default_factory=KTreesSet)
    vb: Visibility = field(default_factory=Visibility)
    prm: Pheromone = field(default_factory=Pheromone)
    input_trees: TreesSet = field(default_factory=TreesSet)
    background_trees: TreesSet = field(default_factory=TreesSet)
    objs: list[list[float]] = field(
        default_factory=lambda: [[0.0] * 4 for _ in range(TIMEOUT_RUNS)]
    )
    timers: list[Timer] = field(default_factory=lambda: [Timer() for _ in range(TIMEOUT_RUNS)])
    bg_tsn: int = 0
    bg_avb: int = 0
    v2v: V2V | None = None

    def initial_settings(self, network: Network, steiner: TreesSet) -> None:
        """Compute candidate trees, initial routes, pheromone, visibility and timers."""
        self.bg_tsn = network.bg_tsn
        self.bg_avb = network.bg_avb

        timer = Timer()
        timer.start()
        self.ktrees = osaco_routing(network, steiner, self.k, self.method, self.v2v)
        timer.end()

        self.input_trees = steiner.input_set(self.bg_tsn, self.bg_avb)
        self.background_trees = steiner.background_set(self.bg_tsn, self.bg_avb)
        self.prm = compute_pheromone(self.ktrees, self.bg_tsn, self.bg_avb)
        self.vb = compute_visibility(self.ktrees, network.tsn_flows, self.bg_tsn, self.bg_avb)

        self.timers = []
        for _ in range(TIMEOUT_RUNS):
            run_timer = Timer()
            run_timer.merge(timer)
            self.timers.append(run_timer)

    def run(self, network: Network, timeout_index: int) -> list[float]:
        """Repeat epochs until the timeout and return the objectives of the best routes."""
        initial, initial_cost = objectives(
            network, self.ktrees, self.input_trees, self.background_trees
        )
        print()
        print(f"initial value: {initial_cost} ")
        print(_objective_line(initial))

        timer = self.timers[timeout_index]
        limit = self.timeout / 1000
        started = time.monotonic()
        number = 1
        while True:
            print(f"\nepoch{number}:")
            timer.start()
            candidate = epoch(network, self, timeout_index)
            timer.stop()

            _, new_cost = objectives(network, self.ktrees, candidate, self.background_trees)
            _, old_cost = objectives(
                network, self.ktrees, self.input_trees, self.background_trees
            )
            if new_cost < old_cost:
                self.input_trees = candidate
                print("Change the selected routing !!")
            number += 1

            if time.monotonic() - started >= limit:
                break

        result, cost = objectives(network, self.ktrees, self.input_trees, self.background_trees)
        print()
        print(f"result value: {cost} ")
        print(_objective_line(result))
        print()

        if result[0] != 0 or result[1] != 0:
            timer.set_max()
        return result


def _initial_levels(groups: list[KTrees], background: int) -> list[list[float]]:
    return [
        [BACKGROUND_PHEROMONE if nth < background else INPUT_PHEROMONE] * len(group.trees)
        for nth, group in enumerate(groups)
    ]


def compute_pheromone(ktrees: KTreesSet, bg_tsn: int, bg_avb: int) -> Pheromone:
    """Background candidates start at 0.5, input candidates at 1.0."""
    return Pheromone(
        tsn=_initial_levels(ktrees.tsn_trees, bg_tsn),
        avb=_initial_levels(ktrees.avb_trees, bg_avb),
    )


def compute_visibility(
    ktrees: KTreesSet, flows: TSNFlows, bg_tsn: int, bg_avb: int
) -> Visibility:
    """TSN: preference over e to the first tree's weight. AVB: preference over the delay.

    The first candidate of a background flow gets twice the preference.
    """
    visibility = Visibility()
    for nth, group in enumerate(ktrees.tsn_trees):
        first_weight = group.trees[0].weight if group.trees else 0
        visibility.tsn.append([
            (PREFERENCE if nth < bg_tsn and kth == 0 else 1.0) / math.exp(float(first_weight))
            for kth in range(len(group.trees))
        ])

    input_flows = flows.input_set().avb_flows
    background_flows = flows.background_set().avb_flows
    for nth, group in enumerate(ktrees.avb_trees):
        flow = background_flows[nth] if nth < bg_avb else input_flows[nth - bg_avb]
        values = []
        for kth, tree in enumerate(group.trees):
            mult = PREFERENCE if nth < bg_avb and kth == 0 else 1.0
            delay = wcd(tree, ktrees, flow, flows)
            values.append(mult / float(delay) if delay else math.inf)
        visibility.avb.append(values)
    return visibility


def _pick(count: int, visibility: list[float], pheromone: list[float]) -> int:
    weights = [visibility[kth] * pheromone[kth] for kth in range(count)]
    total = sum(weights)
    slots: list[int] = []
    for kth, weight in enumerate(weights):
        share = weight / total if total else math.nan
        copies = int(share * 100) if math.isfinite(share) else 0
        slots.extend([kth] * copies)
    if not slots:
        raise ValueError("no candidate tree has a usable selection probability")
    return slots[secrets.randbelow(len(slots))]


def choose_routes(
    osaco: OSACO,
) -> tuple[TreesSet, TreesSet, list[list[int]], list[list[int]]]:
    """Draw one candidate per flow in proportion to visibility times pheromone.

    Returns the input routes, the background routes and the chosen candidate
    indexes of each, as ``[tsn indexes, avb indexes]``.
    """
    inputs = TreesSet()
    background = TreesSet()
    input_locations: list[list[int]] = [[], []]
    background_locations: list[list[int]] = [[], []]

    kinds = (
        (osaco.ktrees.tsn_trees, osaco.vb.tsn, osaco.prm.tsn, osaco.bg_tsn, 0),
        (osaco.ktrees.avb_trees, osaco.vb.avb, osaco.prm.avb, osaco.bg_avb, 1),
    )
    for groups, visibility, pheromone, bg_count, kind in kinds:
        for nth, group in enumerate(groups):
            chosen = _pick(len(group.trees), visibility[nth], pheromone[nth])
            tree = group.trees[chosen]
            if nth < bg_count:
                background_locations[kind].append(chosen)
                target = background
            else:
                input_locations[kind].append(chosen)
                target = inputs
            (target.tsn_trees if kind == 0 else target.avb_trees).append(tree)

    return inputs, background, input_locations, background_locations


def _evaporate(
    levels: list[list[float]], bg_count: int, chosen: list[int], p: float, deposit: float
) -> None:
    for nth, row in enumerate(levels):
        if nth < bg_count:
            continue
        picked = chosen[nth - bg_count]
        for kth in range(len(row)):
            row[kth] *= p
            if kth == picked:
                row[kth] += deposit


def epoch(network: Network, osaco: OSACO, timeout_index: int) -> TreesSet:
    """Draw input routes, score them and update the input flows' pheromone."""
    inputs, _, input_locations, _ = choose_routes(osaco)
    print(f"Select input routing {_format_locations(input_locations)} ")

    timer = osaco.timers[timeout_index]
    timer.stop()
    result, cost = objectives(network, osaco.ktrees, inputs, osaco.background_trees)
    timer.start()

    if result[0] == 0 and result[1] == 0:
        timer.end()

    has_inputs = len(osaco.prm.tsn) > osaco.bg_tsn or len(osaco.prm.avb) > osaco.bg_avb
    deposit = float(1 // cost) if has_inputs else 0.0
    _evaporate(osaco.prm.tsn, osaco.bg_tsn, input_locations[0], osaco.p, deposit)
    _evaporate(osaco.prm.avb, osaco.bg_avb, input_locations[1], osaco.p, deposit)
    return inputs