"""
Cluster-count sweeps for elbow-based model selection.

These helpers support the workflow:
    1. run k-means independently for every k in 1..k_max,
    2. collect the WCSS of each run into a curve indexed by k,
    3. optionally repeat the sweep over several seeds and average the curves,
       since a single seed need not give a monotone curve.

Choosing k from the curve is left to the caller.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from .clustering.kmeans import DEFAULT_MAX_ITER, RunResult, RunState, run_kmeans
from .data_io import MatrixLike, as_data_matrix
from .errors import KMeansError


__all__ = [
    "SweepEntry",
    "SweepResult",
    "run_sweep",
    "run_repeated_sweeps",
    "summarize_sweeps",
]

logger = logging.getLogger(__name__)

SweepSeed = Union[int, np.random.SeedSequence]

RECORD_COLUMNS = [
    "k",
    "wcss",
    "n_iter",
    "converged",
    "state",
    "n_empty_recovered",
    "seed",
    "error",
]


@dataclass(frozen=True)
class SweepEntry:
    """
    One k of a sweep: either a run result or the error that aborted it.
    """

    k: int
    seed: int
    result: Optional[RunResult] = None
    error: Optional[KMeansError] = None

    def as_record(self) -> dict:
        if self.result is None:
            return {
                "k": self.k,
                "wcss": np.nan,
                "n_iter": 0,
                "converged": False,
                "state": None,
                "n_empty_recovered": 0,
                "seed": self.seed,
                "error": f"{type(self.error).__name__}: {self.error}",
            }
        result = self.result
        return {
            "k": self.k,
            "wcss": result.wcss,
            "n_iter": result.n_iter,
            "converged": result.converged,
            "state": result.state.value,
            "n_empty_recovered": len(result.anomalies),
            "seed": self.seed,
            "error": None,
        }


@dataclass(frozen=True)
class SweepResult:
    """
    Results of a sweep over k = 1..k_max, ordered by k.
    """

    entries: Tuple[SweepEntry, ...]

    @property
    def k_values(self) -> List[int]:
        return [entry.k for entry in self.entries]

    @property
    def records(self) -> pd.DataFrame:
        """One row per k summarising the run or its error."""
        return pd.DataFrame.from_records(
            [entry.as_record() for entry in self.entries],
            columns=RECORD_COLUMNS,
        )

    @property
    def errors(self) -> Dict[int, KMeansError]:
        return {entry.k: entry.error for entry in self.entries if entry.error is not None}

    def result_for(self, k: int) -> RunResult:
        """Return the run for ``k``, re-raising its error if it failed."""
        for entry in self.entries:
            if entry.k == k:
                if entry.error is not None:
                    raise entry.error
                return entry.result
        raise KeyError(f"k={k} is not part of this sweep.")

    def wcss_curve(self) -> pd.Series:
        """WCSS indexed by k; failed runs appear as NaN."""
        records = self.records
        return pd.Series(
            records["wcss"].to_numpy(dtype=float),
            index=pd.Index(records["k"], name="k"),
            name="wcss",
        )


def run_sweep(
    data: MatrixLike,
    k_max: int,
    *,
    max_iter: int = DEFAULT_MAX_ITER,
    seed: Optional[SweepSeed] = None,
    n_jobs: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SweepResult:
    """
    Run k-means independently for every k in 1..k_max.

    Parameters
    ----------
    data
        Complete numeric matrix shared read-only by all runs.
    k_max
        Largest cluster count to evaluate.
    max_iter
        Iteration budget for each run.
    seed
        Sweep seed. Each k receives its own integer seed spawned from it, so
        runs are independent yet the whole sweep is reproducible.
    n_jobs
        Number of worker threads. ``None`` or 1 runs sequentially; -1 uses
        all cores. The result order is always k ascending.
    cancel_event
        Shared cancellation flag; in-flight runs stop at their next iteration
        boundary and report ``CANCELLED``.

    Returns
    -------
    SweepResult
        One entry per k. Errors such as ``InvalidK`` for k > n_samples are
        recorded on their entry and do not abort the other k values.
    """

    if k_max < 1:
        raise ValueError("k_max must be at least 1.")

    seeds = _spawn_seeds(seed, k_max)
    k_values = range(1, k_max + 1)

    try:
        matrix = as_data_matrix(data)
    except KMeansError as exc:
        logger.warning("Sweep input rejected for every k: %s", exc)
        return SweepResult(
            entries=tuple(SweepEntry(k=k, seed=s, error=exc) for k, s in zip(k_values, seeds))
        )

    logger.info("Starting k-means sweep for k=1..%d (n_jobs=%s).", k_max, n_jobs)
    if n_jobs is None or n_jobs == 1:
        entries = [
            _run_one(matrix, k, s, max_iter=max_iter, cancel_event=cancel_event)
            for k, s in zip(k_values, seeds)
        ]
    else:
        entries = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_run_one)(matrix, k, s, max_iter=max_iter, cancel_event=cancel_event)
            for k, s in zip(k_values, seeds)
        )

    result = SweepResult(entries=tuple(entries))
    logger.info(
        "Finished k-means sweep: %d runs, %d errors.",
        len(result.entries),
        len(result.errors),
    )
    return result


def _spawn_seeds(seed: Optional[SweepSeed], count: int) -> List[int]:
    sequence = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    return [int(child.generate_state(1)[0]) for child in sequence.spawn(count)]


def _run_one(
    matrix: MatrixLike,
    k: int,
    seed: int,
    *,
    max_iter: int,
    cancel_event: Optional[threading.Event],
) -> SweepEntry:
    try:
        result = run_kmeans(
            matrix,
            k,
            max_iter=max_iter,
            seed=seed,
            cancel_event=cancel_event,
        )
    except KMeansError as exc:
        logger.warning("k-means run for k=%d failed: %s", k, exc)
        return SweepEntry(k=k, seed=seed, error=exc)

    if result.state is RunState.MAX_ITER_REACHED:
        logger.info("k=%d did not converge within %d iterations.", k, max_iter)
    return SweepEntry(k=k, seed=seed, result=result)


def run_repeated_sweeps(
    data: MatrixLike,
    k_max: int,
    seeds: Sequence[int],
    *,
    max_iter: int = DEFAULT_MAX_ITER,
    n_jobs: Optional[int] = None,
) -> pd.DataFrame:
    """
    Execute one sweep per seed and stack their records.

    The returned frame has the per-k columns of ``SweepResult.records`` plus
    a ``sweep_seed`` column identifying the sweep.
    """

    if len(seeds) == 0:
        raise ValueError("seeds must contain at least one value.")

    matrix = as_data_matrix(data)
    frames = []
    for sweep_seed in seeds:
        result = run_sweep(matrix, k_max, max_iter=max_iter, seed=sweep_seed, n_jobs=n_jobs)
        frame = result.records
        frame.insert(0, "sweep_seed", sweep_seed)
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


def summarize_sweeps(records: pd.DataFrame) -> pd.DataFrame:
    """
    Average repeated sweeps into one elbow curve.

    Returns a frame indexed by k with the mean, standard deviation and minimum
    WCSS, the fraction of converged runs among those that did not fail (NaN when
    every run for a k failed), and the number of failed runs.
    """

    if records.empty:
        return pd.DataFrame(
            columns=["wcss_mean", "wcss_std", "wcss_min", "converged_fraction", "n_errors"]
        )

    grouped = records.groupby("k", sort=True)
    succeeded = records[records["error"].isna()].groupby("k", sort=True)
    summary = pd.DataFrame(
        {
            "wcss_mean": grouped["wcss"].mean(),
            "wcss_std": grouped["wcss"].std(),
            "wcss_min": grouped["wcss"].min(),
            "converged_fraction": succeeded["converged"].mean().astype(float),
            "n_errors": grouped["error"].count(),
        }
    )
    return summary
