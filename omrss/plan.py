"""The OMACO plan: Steiner tree, distance tree and two ant colony variants on one network."""

from __future__ import annotations

from dataclasses import dataclass, field

from omrss.algo import MDTC, OSACO, SMT, TIMEOUT_RUNS
from omrss.kspanning import SelectionMethod
from omrss.network import Network
from omrss.schedule import objectives

_RULE = "----------------------------------------"


def _heading(title: str) -> None:
    print(title)
    print(_RULE)


@dataclass
class OmacoPlan:
    """Runs every routing method of the plan and keeps their objectives."""

    network: Network
    smt: SMT = field(default_factory=SMT)
    mdtc: MDTC = field(default_factory=MDTC)
    osaco: OSACO = field(default_factory=OSACO)
    osaco_ias: OSACO = field(
        default_factory=lambda: OSACO(method=SelectionMethod.INCREASING_SEQUENCE)
    )

    @classmethod
    def create(cls, network: Network, timeout: int, k: int, p: float) -> OmacoPlan:
        """A plan whose two ant colonies share ``timeout``, ``k`` and ``p``."""
        return cls(
            network=network,
            osaco=OSACO(timeout=timeout, k=k, p=p, method=SelectionMethod.MIN_WEIGHT),
            osaco_ias=OSACO(
                timeout=timeout, k=k, p=p, method=SelectionMethod.INCREASING_SEQUENCE
            ),
        )

    def _run_colony(self, colony: OSACO, title: str) -> None:
        print()
        _heading(title)
        colony.initial_settings(self.network, self.smt.trees)
        for index in range(TIMEOUT_RUNS):
            colony.objs[index] = colony.run(self.network, index)

    def initiate(self) -> None:
        """Route with every method and score the Steiner and distance trees."""
        _heading("Steiner Tree")
        self.smt.run(self.network)

        print()
        _heading("MDTC")
        self.mdtc.run(self.network)

        self._run_colony(self.osaco, "OSACO")
        self._run_colony(self.osaco_ias, "OSACO_IAS")

        bg_tsn, bg_avb = self.network.bg_tsn, self.network.bg_avb
        obj_smt, _ = objectives(
            self.network,
            self.osaco.ktrees,
            self.smt.trees.input_set(bg_tsn, bg_avb),
            self.smt.trees.background_set(bg_tsn, bg_avb),
        )
        obj_mdt, _ = objectives(
            self.network,
            self.osaco.ktrees,
            self.mdtc.trees.input_set(bg_tsn, bg_avb),
            self.mdtc.trees.background_set(bg_tsn, bg_avb),
        )
        self.smt.objs = obj_smt
        self.mdtc.objs = obj_mdt

        if obj_mdt[0] != 0 or obj_mdt[1] != 0:
            self.mdtc.timer.set_max()

    def show(self) -> None:
        """Print the selected routes of every method and the colony timers."""
        print()
        print("--- The Steiner Tree final selected routing---")
        self.smt.trees.show()

        print()
        print("--- The Distance Tree final selected routing---")
        self.mdtc.trees.show()

        print()
        print("--- 5th Spanning Tree ---")
        self.osaco.ktrees.show()
        for timer in self.osaco.timers:
            timer.export()

        print()
        print("--- The OSACO final selected routing ---")
        self.osaco.input_trees.show()
        self.osaco.background_trees.show()


def new_plans(network: Network, timeout: int, k: int, p: float) -> dict[str, OmacoPlan]:
    """All available plans by name."""
    return {"omaco": OmacoPlan.create(network, timeout, k, p)}