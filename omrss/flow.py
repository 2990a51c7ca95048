"""Flow and stream models, traffic specifications and random endpoints."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

TSN_PERIODS = (100, 500, 1000, 1500, 2000)
TSN_DATASIZES = (30.0, 40.0, 50.0, 60.0, 70.0, 80.0, 90.0, 100.0)
AVB_DATASIZES = (1000.0, 1100.0, 1200.0, 1300.0, 1400.0, 1500.0)
UNIMPORTANT_CAN_PERIODS = (50000, 60000, 70000, 80000, 90000, 100000)
UNIMPORTANT_CAN_DEADLINES = (10000, 12000, 14000, 16000, 18000, 20000)


@dataclass(frozen=True)
class FlowSpec:
    """Period and deadline in microseconds, data size in bytes."""

    period: int
    deadline: int
    datasize: float


@dataclass
class Stream:
    """One frame instance of a flow within the hyperperiod."""

    name: str
    arrival_time: int
    datasize: float
    deadline: int
    finish_time: int


@dataclass
class Flow:
    """A periodic multicast flow from one talker to several listeners."""

    period: int
    deadline: int
    datasize: float
    hyperperiod: int
    source: int = 0
    destinations: list[int] = field(default_factory=list)
    streams: list[Stream] = field(default_factory=list)


@dataclass
class TSNFlows:
    """TSN and AVB flows; the first ``bg_tsn``/``bg_avb`` of each are background."""

    tsn_flows: list[Flow] = field(default_factory=list)
    avb_flows: list[Flow] = field(default_factory=list)
    bg_tsn: int = 0
    bg_avb: int = 0

    def input_set(self) -> TSNFlows:
        """The input (non-background) flows."""
        return TSNFlows(self.tsn_flows[self.bg_tsn:], self.avb_flows[self.bg_avb:])

    def background_set(self) -> TSNFlows:
        """The background flows."""
        return TSNFlows(self.tsn_flows[:self.bg_tsn], self.avb_flows[:self.bg_avb])

    def groups(self) -> tuple[tuple[str, list[Flow]], ...]:
        """Display labels paired with their flow lists."""
        return (("TSNflow", self.tsn_flows), ("AVBflow", self.avb_flows))


@dataclass
class CANFlows:
    """Important and unimportant CAN flows."""

    important: list[Flow] = field(default_factory=list)
    unimportant: list[Flow] = field(default_factory=list)

    def input_set(self) -> CANFlows:
        """All CAN flows, in new lists."""
        return CANFlows(list(self.important), list(self.unimportant))

    def groups(self) -> tuple[tuple[str, list[Flow]], ...]:
        """Display labels paired with their flow lists."""
        return (("importantCANFlow", self.important), ("unimportantCANFlow", self.unimportant))


def tsn_spec() -> FlowSpec:
    """A random TSN specification; the deadline equals the period."""
    period = secrets.choice(TSN_PERIODS)
    return FlowSpec(period, period, secrets.choice(TSN_DATASIZES))


def avb_spec() -> FlowSpec:
    """A random AVB specification with a 125us period and 2000us deadline."""
    return FlowSpec(125, 2000, secrets.choice(AVB_DATASIZES))


def important_can_spec() -> FlowSpec:
    """The fixed important CAN specification."""
    return FlowSpec(5000, 5000, 8.0)


def unimportant_can_spec() -> FlowSpec:
    """A random unimportant CAN specification."""
    return FlowSpec(
        secrets.choice(UNIMPORTANT_CAN_PERIODS),
        secrets.choice(UNIMPORTANT_CAN_DEADLINES),
        8.0,
    )


def random_devices(node_count: int) -> tuple[int, list[int]]:
    """Pick a talker (``1000 + i``) and between 2 and ``node_count - 2`` listeners (``2000 + j``)."""
    if node_count < 5:
        raise ValueError("at least 5 end stations are needed to pick random devices")
    source = secrets.randbelow(node_count)
    candidates = [index + 2000 for index in range(node_count) if index != source]
    count = secrets.randbelow(2) + secrets.randbelow(node_count - 4) + 2
    selected = [candidates.pop(secrets.randbelow(len(candidates))) for _ in range(count)]
    return source + 1000, selected