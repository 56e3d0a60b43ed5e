# meetpoint/services/meeting_point_solver.py

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from time import perf_counter
from typing import List, Optional, Sequence

from meetpoint.core.errors import ConfigurationError, NotImplementedModeError
from meetpoint.core.logger import logger
from meetpoint.models.geo import Coordinate
from meetpoint.models.meeting import SolverResult, TransportMode
from meetpoint.services.fairness import select_best
from meetpoint.services.geodesy import spherical_centroid
from meetpoint.services.grid import build_grid
from meetpoint.services.ors_client import RouteGeometryProvider, TravelTimeOracle
from meetpoint.services.route_sampler import equal_time_positions

TRAIN_NOT_IMPLEMENTED = "Train/public transport not implemented. Use geographic or car."


@dataclass(frozen=True)
class SolveContext:
    """
    Everything a search strategy may look at. Replaced, never mutated.
    """
    origins: Sequence[Coordinate]
    oracle: TravelTimeOracle
    router: Optional[RouteGeometryProvider]
    best: Optional[SolverResult] = None


def grid_search(
    context: SolveContext, center: Coordinate, step_deg: float, size: int
) -> SolverResult:
    """
    One oracle round trip: evaluate a size x size grid around `center`.
    """
    candidates = build_grid(center, step_deg, size)
    matrix = context.oracle.duration_matrix(context.origins, candidates)
    return select_best(context.origins, candidates, matrix)


class SearchStrategy(ABC):
    """
    One stage of the car-mode cascade.

    - should_run(best): whether the current best is poor enough to try this stage
    - run(context): a new candidate result, or None when the stage cannot run
    - accepts(result, best): whether `result` replaces `best`
    - halt_on_reject: stop the whole cascade when this stage does not help
    """

    name: str = "strategy"
    halt_on_reject: bool = False

    def should_run(self, best: Optional[SolverResult]) -> bool:
        return best is not None

    @abstractmethod
    def run(self, context: SolveContext) -> Optional[SolverResult]:
        ...

    def accepts(self, result: SolverResult, best: SolverResult) -> bool:
        return result.score < best.score


def _spread_exceeds(best: Optional[SolverResult], threshold_sec: float) -> bool:
    if best is None:
        return False
    return best.unreachable > 0 or best.range_sec > threshold_sec


class InitialGridStrategy(SearchStrategy):
    """
    Coarse 3x3 grid (~3 km spacing) around the spherical centroid of the origins.
    """

    name = "initial-grid"
    STEP_DEG = 0.03
    SIZE = 3

    def should_run(self, best: Optional[SolverResult]) -> bool:
        return best is None

    def run(self, context: SolveContext) -> Optional[SolverResult]:
        seed = spherical_centroid(context.origins)
        logger.info(f"Geographic seed at ({seed.lat:.6f}, {seed.lon:.6f})")
        return grid_search(context, seed, self.STEP_DEG, self.SIZE)


class RefinementStrategy(SearchStrategy):
    """
    Finer 5x5 grid (~1 km spacing) around the best candidate so far.

    Runs when the spread exceeds 10 minutes; a refined result is kept only if
    its spread is not larger than the current one.
    """

    name = "refinement"
    THRESHOLD_SEC = 600.0
    STEP_DEG = 0.01
    SIZE = 5

    def should_run(self, best: Optional[SolverResult]) -> bool:
        return _spread_exceeds(best, self.THRESHOLD_SEC)

    def run(self, context: SolveContext) -> Optional[SolverResult]:
        return grid_search(context, context.best.chosen, self.STEP_DEG, self.SIZE)

    def accepts(self, result: SolverResult, best: SolverResult) -> bool:
        return result.score <= best.score


class RecenteringStrategy(SearchStrategy):
    """
    Re-anchor the search where participants would actually be after the
    average travel time along their real routes, then search a wider 7x7 grid
    (~2 km spacing) there.

    Runs when the spread exceeds 30 minutes. Only a strictly better result is
    kept; otherwise the cascade stops.
    """

    name = "recentering"
    halt_on_reject = True
    THRESHOLD_SEC = 1800.0
    STEP_DEG = 0.02
    SIZE = 7

    def __init__(self, iteration: int = 1) -> None:
        self.iteration = iteration
        self.name = f"recentering#{iteration}"

    def should_run(self, best: Optional[SolverResult]) -> bool:
        return _spread_exceeds(best, self.THRESHOLD_SEC)

    def run(self, context: SolveContext) -> Optional[SolverResult]:
        if context.router is None:
            logger.warning("No route geometry provider; recentering skipped")
            return None

        positions = equal_time_positions(context.origins, context.best, context.router)
        if not positions:
            return None

        center = spherical_centroid(positions)
        logger.info(f"Recentering around ({center.lat:.6f}, {center.lon:.6f})")
        return grid_search(context, center, self.STEP_DEG, self.SIZE)


MAX_RECENTER_ITERATIONS = 3


def default_strategies() -> List[SearchStrategy]:
    return [
        InitialGridStrategy(),
        RefinementStrategy(),
        *(RecenteringStrategy(i + 1) for i in range(MAX_RECENTER_ITERATIONS)),
    ]


class MeetingPointSolver:
    """
    Computes a fair meeting point for a group of origins.

    - geographic: spherical centroid, no travel-time data
    - car: cascade of grid searches against a travel-time oracle, each stage
      only run when the previous best is not fair enough
    - train: not implemented
    """

    def __init__(
        self,
        oracle: Optional[TravelTimeOracle] = None,
        router: Optional[RouteGeometryProvider] = None,
        strategies: Optional[List[SearchStrategy]] = None,
    ) -> None:
        self.oracle = oracle
        self.router = router
        self.strategies = strategies if strategies is not None else default_strategies()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def solve(self, origins: Sequence[Coordinate], mode: TransportMode) -> SolverResult:
        if not origins:
            raise ValueError("At least one origin is required")

        logger.info(f"Solving meeting point for {len(origins)} origins, mode={mode.value}")

        if mode is TransportMode.TRAIN:
            raise NotImplementedModeError(TRAIN_NOT_IMPLEMENTED)

        if mode is TransportMode.GEOGRAPHIC:
            return SolverResult(chosen=spherical_centroid(origins))

        return self._solve_car(origins)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _solve_car(self, origins: Sequence[Coordinate]) -> SolverResult:
        if self.oracle is None:
            raise ConfigurationError("No travel-time service configured")

        t0 = perf_counter()
        context = SolveContext(origins=origins, oracle=self.oracle, router=self.router)

        for strategy in self.strategies:
            best = context.best
            if not strategy.should_run(best):
                continue

            t_stage = perf_counter()
            result = strategy.run(context)
            elapsed_ms = (perf_counter() - t_stage) * 1000.0

            if result is None:
                logger.info(f"Stage {strategy.name} produced no result ({elapsed_ms:.2f} ms)")
                if strategy.halt_on_reject:
                    break
                continue

            if best is None or strategy.accepts(result, best):
                logger.info(
                    f"Stage {strategy.name} accepted: range={result.range_sec:.0f} s, "
                    f"max={result.max_sec:.0f} s ({elapsed_ms:.2f} ms)"
                )
                context = replace(context, best=result)
            else:
                logger.info(
                    f"Stage {strategy.name} rejected: range={result.range_sec:.0f} s "
                    f"vs best {best.range_sec:.0f} s ({elapsed_ms:.2f} ms)"
                )
                if strategy.halt_on_reject:
                    break

        best = context.best
        if best is None:
            raise RuntimeError("No search strategy produced a result")

        logger.info(
            f"Meeting point ({best.chosen.lat:.6f}, {best.chosen.lon:.6f}) "
            f"range={best.range_sec:.0f} s in {(perf_counter() - t0) * 1000.0:.2f} ms"
        )
        return best
