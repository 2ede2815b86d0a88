"""
Flow engine: redistributes rain over a walled relief until it settles.

The engine walks the relief left to right. At every column it releases the
rain still pending in the rain bank into a moving packet of water, classifies
the column by comparing its water level with both neighbours, and hands the
packet to the handler for that topology:

    prev vs curr   next vs curr   topology     handler
    ------------   ------------   ----------   ---------------------------------
         >              >         VALLEY       pool, spill over the lower rim
         <              <         PEAK         split evenly left / right
       > or =           <         DOWNWARDS    carry forward, re-place returns
         <              =         S_PLATEAU    wide peak, or shelf draining left
         >              =         L_PLATEAU    flat-bottomed valley, or ledge
         <              >         UPHILL       send everything back left
         =            > or =      LEVEL        send everything back left

Handlers may recurse forward (spilling water to the right) and return
"backwater": water that could not be placed right of the position and now
leaves it to the left. Callers place backwater again at their own position,
so it keeps moving left until some valley absorbs it. Both end walls are
infinitely tall, hence every drop ends up pooled somewhere.

Re-entries at the same position run as a loop inside ``flow``; only forward
calls recurse, so the stack depth is bounded by a small multiple of the
number of columns.

Backwater moves left one column per frame, so a long monotonic slope costs
time roughly quadratic in its length: reliefs of a few thousand columns
settle quickly, tens of thousands take minutes.
"""

import logging
import math
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, NamedTuple, Tuple

import numpy as np

from src.config import (
    LEVEL_TOLERANCE_SCALE,
    MAX_PASS_FACTOR,
    PACKET_EPSILON_SCALE,
    RAIN_PER_HOUR,
    RECURSION_FRAMES_PER_COLUMN,
)
from src.rainflow.column import compare_levels
from src.rainflow.rain_bank import RainBank
from src.rainflow.terrain import Terrain

logger = logging.getLogger(__name__)


class FlowClassificationError(RuntimeError):
    """A column's neighbourhood matched no topology."""


class ConvergenceError(RuntimeError):
    """The drive loop failed to settle the rain, or lost water doing so."""


class Topology(Enum):
    """Local shape of the water surface around a column."""

    VALLEY = "valley"
    PEAK = "peak"
    DOWNWARDS = "downwards"
    S_PLATEAU = "s_plateau"
    L_PLATEAU = "l_plateau"
    UPHILL = "uphill"
    LEVEL = "level"


# (prev compared to curr, next compared to curr) -> topology
# 1 = neighbour higher, 0 = level, -1 = neighbour lower
TOPOLOGY_TABLE: Dict[Tuple[int, int], Topology] = {
    (1, 1): Topology.VALLEY,
    (1, 0): Topology.L_PLATEAU,
    (1, -1): Topology.DOWNWARDS,
    (0, 1): Topology.LEVEL,
    (0, 0): Topology.LEVEL,
    (0, -1): Topology.DOWNWARDS,
    (-1, 1): Topology.UPHILL,
    (-1, 0): Topology.S_PLATEAU,
    (-1, -1): Topology.PEAK,
}


class Step(NamedTuple):
    """Handler outcome: water leaving the position, or to re-place there."""

    water: float
    reenter: bool = False


@contextmanager
def _recursion_headroom(frames: int):
    """Temporarily raise the interpreter recursion limit by ``frames``."""
    previous = sys.getrecursionlimit()
    if frames > 0:
        sys.setrecursionlimit(previous + frames)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class FlowEngine:
    """
    Settles rain on a terrain into hydrostatic equilibrium.

    The engine owns the terrain and its rain bank for the duration of
    :meth:`rain`; column water is mutated in place.

    Args:
        terrain: Relief with walls already inserted

    Example:
        >>> engine = FlowEngine(Terrain([3, 1]))
        >>> engine.rain(1.0)
        0.0
        >>> engine.water_level(1), engine.water_level(2)
        (3.0, 3.0)
    """

    def __init__(self, terrain: Terrain):
        self.terrain = terrain
        self.bank = RainBank(terrain.n_interior, 0.0)
        self.epsilon = PACKET_EPSILON_SCALE
        self.tolerance = LEVEL_TOLERANCE_SCALE * max(1.0, terrain.max_height())
        self._handlers = {
            Topology.VALLEY: self._valley,
            Topology.PEAK: self._peak,
            Topology.DOWNWARDS: self._downwards,
            Topology.S_PLATEAU: self._s_plateau,
            Topology.L_PLATEAU: self._l_plateau,
            Topology.UPHILL: self._send_back,
            Topology.LEVEL: self._send_back,
        }

    def water_level(self, pos: int) -> float:
        """Water level at terrain index ``pos`` (1..N-2 for interior columns)."""
        return self.terrain.water_level(pos)

    def rain(self, hours: float) -> float:
        """
        Rain for ``hours`` and let the water settle.

        Args:
            hours: Duration of the rain; every interior column receives
                ``hours * RAIN_PER_HOUR`` units of water

        Returns:
            Water still in flight when the drive loop stopped (0 at equilibrium)

        Raises:
            ValueError: If hours is negative or not finite
            ConvergenceError: If the drive loop exceeds its pass bound or the
                settled water does not match the rain that fell
        """
        if not math.isfinite(hours) or hours < 0:
            raise ValueError(f"Rain hours must be finite and non-negative, got {hours}")

        terrain = self.terrain
        n = terrain.n_interior
        per_column = hours * RAIN_PER_HOUR
        total = per_column * n
        water_before = float(terrain.water().sum())

        self.bank = RainBank(n, per_column)
        self.epsilon = PACKET_EPSILON_SCALE * max(1.0, total)
        self.tolerance = LEVEL_TOLERANCE_SCALE * max(1.0, terrain.max_height() + total)

        logger.info(f"Raining {hours:g} h on {n} columns ({total:g} units of water)")

        max_passes = MAX_PASS_FACTOR * len(terrain) + 1
        with _recursion_headroom(RECURSION_FRAMES_PER_COLUMN * len(terrain)):
            backwater = self.flow(1, 0.0)
            passes = 1
            while backwater > 0 or not self.bank.drained:
                if passes >= max_passes:
                    raise ConvergenceError(
                        f"Rain did not settle after {passes} passes "
                        f"(backwater {backwater:g}, bank remaining {self.bank.remaining:g})"
                    )
                logger.debug(f"Pass {passes + 1}: re-flowing backwater {backwater:g}")
                backwater = self.flow(1, backwater)
                passes += 1

        settled = float(terrain.water().sum()) - water_before
        if not math.isclose(settled, total, rel_tol=1e-9, abs_tol=1e-9):
            raise ConvergenceError(
                f"Water not conserved: {total:g} units fell but {settled:g} settled"
            )

        logger.info(f"Rain settled after {passes} pass(es)")
        return backwater

    def classify(self, pos: int) -> Topology:
        """
        Classify the water surface around ``pos``.

        Raises:
            FlowClassificationError: If the neighbourhood matches no topology
        """
        prev, curr, nxt = self.terrain[pos - 1], self.terrain[pos], self.terrain[pos + 1]
        key = (
            compare_levels(prev, curr, self.tolerance),
            compare_levels(nxt, curr, self.tolerance),
        )
        try:
            return TOPOLOGY_TABLE[key]
        except KeyError:
            raise FlowClassificationError(
                f"Unclassified topology at position {pos}: water levels "
                f"{prev.water_level}, {curr.water_level}, {nxt.water_level}"
            ) from None

    def flow(self, pos: int, in_flight: float) -> float:
        """
        Carry ``in_flight`` water into ``pos`` and settle what can be settled.

        Returns:
            Backwater: water leaving ``pos`` towards its left neighbour.
        """
        terrain = self.terrain
        while True:
            if pos >= terrain.right_wall:
                return in_flight

            in_flight += self.bank.claim(pos - 1)

            if in_flight < self.epsilon:
                # Rounding residue stays where it is
                if in_flight > 0:
                    terrain[pos].add_water(in_flight)
                backwater = self.flow(pos + 1, 0.0)
                if backwater <= 0:
                    return backwater
                # Returning water keeps going left when this column is above its left neighbour
                if compare_levels(terrain[pos - 1], terrain[pos], self.tolerance) < 0:
                    return backwater
                in_flight = backwater
                continue

            topology = self.classify(pos)
            step = self._handlers[topology](pos, in_flight)
            if not step.reenter or step.water <= 0:
                return step.water
            in_flight = step.water

    def _valley(self, pos: int, in_flight: float) -> Step:
        terrain = self.terrain
        left_diff = terrain[pos - 1] - terrain[pos]
        right_diff = terrain[pos + 1] - terrain[pos]
        return self._fill_valley(pos, pos + 1, in_flight, left_diff, right_diff)

    def _fill_valley(
        self,
        pos: int,
        end_pos: int,
        in_flight: float,
        left_diff: float,
        right_diff: float,
    ) -> Step:
        """
        Pool water on the flat floor ``[pos, end_pos)`` up to its lower rim.

        Water left over once the floor reaches the lower rim spills over it:
        backwater when the left rim is lower, a re-entry at ``pos`` when the
        right rim is lower (the floor now forms a plateau with the rim), and
        an even split when both rims are level.
        """
        floor = self.terrain.columns[pos:end_pos]
        width = end_pos - pos
        rim = min(left_diff, right_diff)
        share = in_flight / width

        if share <= rim:
            for column in floor:
                column.add_water(share)
            backwater = self.flow(end_pos, 0.0)
            return Step(backwater, reenter=True)

        for column in floor:
            column.add_water(rim)
        remainder = in_flight - rim * width

        if right_diff > left_diff + self.tolerance:
            logger.debug(f"Valley {pos}..{end_pos - 1} overflows left with {remainder:g}")
            return Step(remainder)
        if left_diff > right_diff + self.tolerance:
            logger.debug(f"Valley {pos}..{end_pos - 1} overflows right with {remainder:g}")
            return Step(remainder, reenter=True)

        logger.debug(f"Valley {pos}..{end_pos - 1} overflows both rims with {remainder:g}")
        half = remainder / 2
        return Step(half + self.flow(end_pos, half))

    def _peak(self, pos: int, in_flight: float) -> Step:
        return self._split_over_peak(pos + 1, in_flight)

    def _split_over_peak(self, end_pos: int, in_flight: float) -> Step:
        # Nothing pools on a peak
        half = in_flight / 2
        return Step(half + self.flow(end_pos, half))

    def _downwards(self, pos: int, in_flight: float) -> Step:
        backwater = self.flow(pos + 1, in_flight)
        return Step(backwater, reenter=True)

    def _scan_plateau(self, pos: int, in_flight: float) -> Tuple[int, float]:
        """Find the first column right of ``pos`` off its level, claiming rain on the way."""
        terrain = self.terrain
        end_pos = pos + 1
        while compare_levels(terrain[end_pos], terrain[pos], self.tolerance) == 0:
            in_flight += self.bank.claim(end_pos - 1)
            end_pos += 1
        return end_pos, in_flight

    def _l_plateau(self, pos: int, in_flight: float) -> Step:
        terrain = self.terrain
        end_pos, in_flight = self._scan_plateau(pos, in_flight)
        if compare_levels(terrain[end_pos], terrain[pos], self.tolerance) > 0:
            left_diff = terrain[pos - 1] - terrain[pos]
            right_diff = terrain[end_pos] - terrain[pos]
            return self._fill_valley(pos, end_pos, in_flight, left_diff, right_diff)

        backwater = self.flow(end_pos, in_flight)
        return Step(backwater, reenter=True)

    def _s_plateau(self, pos: int, in_flight: float) -> Step:
        terrain = self.terrain
        end_pos, in_flight = self._scan_plateau(pos, in_flight)
        if compare_levels(terrain[end_pos], terrain[pos], self.tolerance) < 0:
            return self._split_over_peak(end_pos, in_flight)
        # Flat shelf rising to the right drains left
        return Step(in_flight)

    def _send_back(self, pos: int, in_flight: float) -> Step:
        return Step(in_flight)


@dataclass
class RainfallResult:
    """
    Final state of a rainfall simulation.

    Attributes:
        heights: Terrain height of each interior column
        water: Water depth pooled on each interior column
        hours: Duration of the rain
        remainder: Water still in flight when the engine stopped (0 at equilibrium)
    """

    heights: np.ndarray
    water: np.ndarray
    hours: float
    remainder: float = 0.0

    @property
    def water_levels(self) -> np.ndarray:
        return self.heights + self.water

    @property
    def total_water(self) -> float:
        return float(self.water.sum())

    def __len__(self):
        return len(self.heights)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "heights": self.heights.tolist(),
            "water": self.water.tolist(),
            "water_levels": self.water_levels.tolist(),
            "hours": self.hours,
            "remainder": self.remainder,
        }


def simulate(relief: Iterable[float], hours: float) -> RainfallResult:
    """
    Rain on a relief and return its settled state.

    Args:
        relief: Interior column heights, left to right; walls are added
        hours: Duration of the rain

    Returns:
        RainfallResult with heights, water depths and water levels per column

    Raises:
        ValueError: If the relief is empty or hours / heights are invalid
    """
    terrain = Terrain(relief)
    engine = FlowEngine(terrain)
    remainder = engine.rain(hours)
    return RainfallResult(
        heights=terrain.heights(),
        water=terrain.water(),
        hours=float(hours),
        remainder=remainder,
    )


def rain(relief: Iterable[float], hours: float) -> np.ndarray:
    """
    Final water level of each interior column after ``hours`` of rain.

    Example:
        >>> rain([3, 1], 1.0).tolist()
        [3.0, 3.0]
    """
    return simulate(relief, hours).water_levels
