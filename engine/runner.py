"""Multi-generation driver around the population transition."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Callable, Mapping

from core.analytics import summarize_generation
from core.random_source import RandomSource
from data.logger import EvolutionLogger
from evolution.base import EvaluationFunc, EvolutionOperators, FitnessTransform, RetryLimits
from evolution.population import Lifeform, Population


LOGGER = logging.getLogger(__name__)

GenerationCallback = Callable[[Population], None]


class RunnerState(str, enum.Enum):
    """Execution states of a run."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class RunnerExecutionError(RuntimeError):
    """Raised when a runner side effect such as metrics logging fails."""


class EvolutionRunner:
    """Orchestrates generation-based evolution for one experiment.

    The runner owns the single random source of the run and threads it
    through initialization and every transition, so a run is reproducible
    from its seed. Every completed generation stays valid: its champion is
    kept in ``champions`` and, with a logger configured, persisted before
    the next generation starts.
    """

    def __init__(
        self,
        evaluate: EvaluationFunc,
        transform: FitnessTransform,
        genome_length: int,
        population_size: int,
        seed: int = 0,
        operators: EvolutionOperators | None = None,
        limits: RetryLimits | None = None,
        logger: EvolutionLogger | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        self.evaluate = evaluate
        self.transform = transform
        self.genome_length = genome_length
        self.population_size = population_size
        self.operators = operators or EvolutionOperators.default()
        self.limits = limits or RetryLimits()

        self.seed = seed
        self.rng = RandomSource(seed)

        self.logger = logger
        self.config = dict(config or {})
        self.experiment_id: str | None = None
        if self.logger is not None:
            self.experiment_id = self.logger.start_experiment(
                config=self.config,
                seed=int(seed),
                metadata={"runner_seed": int(seed)},
            )

        self.population: Population | None = None
        self.champions: list[Lifeform] = []
        self.last_generation_metrics: dict[str, float] | None = None

        self._state = RunnerState.IDLE
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()

    def initialize(self) -> Population:
        """Create and score generation 0."""
        LOGGER.info("creating population of %d genomes (%d bytes each)", self.population_size, self.genome_length)
        population = Population.create(
            self.rng,
            self.genome_length,
            self.population_size,
            self.evaluate,
            self.transform,
        )
        self._complete(population)
        return population

    def run_generation(self) -> Population:
        """Advance one generation, initializing first if needed."""
        if self.population is None:
            return self.initialize()
        population = self.population.evolve(
            self.rng,
            self.evaluate,
            self.transform,
            operators=self.operators,
            limits=self.limits,
        )
        self._complete(population)
        return population

    def run(self, generations: int, on_generation: GenerationCallback | None = None) -> Population:
        """Run ``generations`` transitions after generation 0.

        ``stop()`` ends the run after the generation in progress completes.
        """
        if generations < 0:
            raise ValueError("generations must be non-negative")

        self._stop_event.clear()
        with self._state_lock:
            self._state = RunnerState.RUNNING

        try:
            population = self.population
            if population is None:
                population = self.initialize()
                if on_generation is not None:
                    on_generation(population)
            for _ in range(generations):
                if self._stop_event.is_set():
                    break
                population = self.run_generation()
                if on_generation is not None:
                    on_generation(population)
        finally:
            with self._state_lock:
                if self._state != RunnerState.STOPPED:
                    self._state = RunnerState.IDLE

        return population

    def stop(self) -> None:
        """Request the run to end after the current generation."""
        self._stop_event.set()
        with self._state_lock:
            self._state = RunnerState.STOPPED

    def control_state(self) -> str:
        with self._state_lock:
            return str(self._state.value)

    def _complete(self, population: Population) -> None:
        self.population = population
        champion = population.fittest()
        self.champions.append(champion)
        self.last_generation_metrics = summarize_generation(population)
        LOGGER.info(
            "generation %d champion eva=%f fit=%f avg eval=%f",
            population.generation,
            champion.evaluation,
            champion.fitness,
            self.last_generation_metrics["mean_evaluation"],
        )
        self.on_generation_end(population.generation, champion)

    def on_generation_end(self, generation_index: int, champion: Lifeform) -> None:
        """Persist metrics and the champion genome if a logger is configured."""
        if self.logger is None or self.experiment_id is None:
            return
        self._safe_call(
            "logger.log_metrics",
            self.logger.log_metrics,
            experiment_id=self.experiment_id,
            generation_index=generation_index,
            metrics=self.last_generation_metrics or {},
            champion_genes=champion.genes,
        )

    @staticmethod
    def _safe_call(label: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            raise RunnerExecutionError(f"{label} failed: {exc}") from exc
