"""Accumulation, averaging and storage of plan results over many test cases."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

from omrss.timer import format_duration

log = logging.getLogger(__name__)

RUNS = 5
OBJECTIVES = 4
RUN_LABELS = ("200ms", "400ms", "600ms", "800ms", "1000ms")


def _zeros() -> list[float]:
    return [0.0] * OBJECTIVES


def _run_grid() -> list[list[float]]:
    return [_zeros() for _ in range(RUNS)]


def _div_duration(total: int, count: int) -> int:
    if count == 0:
        raise ZeroDivisionError("no test cases to average over")
    quotient = abs(total) // abs(count)
    return quotient if (total >= 0) == (count > 0) else -quotient


def _objective_line(values: Sequence[float]) -> str:
    return f"O1: {values[0]:.6f} O2: {values[1]:.6f} O3: pass O4: {values[3]:.6f} \n"


def format_row(values: Iterable[float]) -> list[str]:
    """Values as strings with six decimals."""
    return [f"{value:.6f}" for value in values]


def store_csv(path: str | Path, values: Iterable[float]) -> None:
    """Append one row of values to a CSV file, creating it if needed."""
    log.info("Opening file %s in append mode", path)
    with open(path, "a", newline="") as handle:
        csv.writer(handle, lineterminator="\n").writerow(format_row(values))


@dataclass
class OmacoMemorizer:
    """Sums and averages of the OMACO plan's objectives and computing times.

    Times are integer nanosecond counts.
    """

    smt: list[float] = field(default_factory=_zeros)
    mdt: list[float] = field(default_factory=_zeros)
    osaco: list[list[float]] = field(default_factory=_run_grid)
    osaco_ias: list[list[float]] = field(default_factory=_run_grid)
    time_mdt: int = 0
    time_osaco: list[int] = field(default_factory=lambda: [0] * RUNS)
    time_osaco_ias: list[int] = field(default_factory=lambda: [0] * RUNS)

    def accumulate(self, plan: Any) -> None:
        """Add one plan's objectives and times to the sums."""
        self.time_mdt += plan.mdtc.timer.total
        for j in range(OBJECTIVES):
            self.smt[j] += plan.smt.objs[j]
            self.mdt[j] += plan.mdtc.objs[j]
        for i in range(RUNS):
            for j in range(OBJECTIVES):
                self.osaco[i][j] += plan.osaco.objs[i][j]
                self.osaco_ias[i][j] += plan.osaco_ias.objs[i][j]
            self.time_osaco[i] += plan.osaco.timers[i].total
            self.time_osaco_ias[i] += plan.osaco_ias.timers[i].total

    def average(self, test_cases: int) -> None:
        """Divide the sums by the number of test cases."""
        self.time_mdt = _div_duration(self.time_mdt, test_cases)
        self.smt = [value / test_cases for value in self.smt]
        self.mdt = [value / test_cases for value in self.mdt]
        self.osaco = [[value / test_cases for value in row] for row in self.osaco]
        self.osaco_ias = [[value / test_cases for value in row] for row in self.osaco_ias]
        self.time_osaco = [_div_duration(t, test_cases) for t in self.time_osaco]
        self.time_osaco_ias = [_div_duration(t, test_cases) for t in self.time_osaco_ias]

    def _colony_text(self, title: str, grid: list[list[float]], times: list[int]) -> str:
        text = f"The average objective result for {title}:\n"
        for label, values in zip(reversed(RUN_LABELS), reversed(grid)):
            text += f"{label}: " + _objective_line(values)
        text += f"Computering time: {format_duration(times[-1])}\n"
        return text

    def _body(self) -> str:
        return (
            "The average objective result for the Steiner Tree:\n"
            + _objective_line(self.smt)
            + "The average objective result for the MDTC:\n"
            + _objective_line(self.mdt)
            + f"Computering time: {format_duration(self.time_mdt)}\n"
            + self._colony_text("OSACO", self.osaco, self.time_osaco)
            + self._colony_text("OSACO_IAS", self.osaco_ias, self.time_osaco_ias)
        )

    def report(self) -> str:
        """The results text as written to the result file."""
        return "--- The experimental results are as follows --- \n" + self._body()

    def output_results(self) -> str:
        """Print the averaged results and return the printed text."""
        text = "\n--- The experimental results are as follows ---\n" + self._body() + "\n"
        print(text, end="")
        return text

    def store_files(
        self,
        topology_name: str,
        test_case: int,
        tsn: int,
        avb: int,
        k: int,
        p: float,
        directory: str | Path = "result",
    ) -> Path:
        """Append the results text to a file named after the experiment; return its path."""
        folder = Path(directory)
        if not folder.exists():
            log.info("Creating directory %s", folder)
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / f"{topology_name}_testcase{test_case}_tsn{tsn}_avb{avb}_K{k}_P{p:.1f}.txt"
        log.info("Writing text to file %s", path)
        with open(path, "a") as handle:
            handle.write(self.report() + "\n")
        return path

    def store_data(self, directory: str | Path = "data") -> Path:
        """Append the averaged objectives to one CSV file per method and timeout."""
        folder = Path(directory)
        if not folder.exists():
            log.info("Creating directory %s", folder)
        folder.mkdir(parents=True, exist_ok=True)

        log.info("Storing SMT data to CSV...")
        store_csv(folder / "SMT.csv", self.smt)
        log.info("Storing MTDC data to CSV...")
        store_csv(folder / "MTDC.csv", self.mdt)
        for title, grid in (("OSACO", self.osaco), ("OSACO_IAS", self.osaco_ias)):
            log.info("Storing %s data to CSV...", title)
            for label, values in zip(reversed(RUN_LABELS), reversed(grid)):
                store_csv(folder / f"OSACO{label}.csv", values)
        return folder


def new_memorizers() -> dict[str, OmacoMemorizer]:
    """All available memorizers by plan name."""
    return {"omaco": OmacoMemorizer()}