#!/usr/bin/env python3
from __future__ import annotations

import argparse
import datetime as _dt
import json
import logging
import sys
from pathlib import Path

import pandas as pd

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from kmclust.clustering.kmeans import DEFAULT_MAX_ITER  # noqa: E402
from kmclust.data_io import DataMatrix, load_matrix  # noqa: E402
from kmclust.metrics import cluster_counts, membership_table  # noqa: E402
from kmclust.sweep import (  # noqa: E402
    SweepResult,
    run_repeated_sweeps,
    run_sweep,
    summarize_sweeps,
)


RESULTS_ROOT = REPO_ROOT / "Results" / "elbow"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a k-means sweep over k=1..K and write the WCSS curve for elbow selection."
    )
    parser.add_argument(
        "matrix",
        type=Path,
        help="Complete sample matrix (.csv with sample IDs in the first column, or .npy).",
    )
    parser.add_argument(
        "--k-max",
        type=int,
        default=10,
        help="Largest number of clusters to evaluate (default: 10).",
    )
    parser.add_argument(
        "--max-iter",
        type=int,
        default=DEFAULT_MAX_ITER,
        help=f"Iteration budget per run (default: {DEFAULT_MAX_ITER}).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Sweep seed (default: 0).",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=1,
        help="Number of sweeps with consecutive seeds to average (default: 1).",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=None,
        help="Worker threads per sweep; -1 uses all cores (default: sequential).",
    )
    parser.add_argument(
        "--k",
        type=int,
        dest="chosen_k",
        default=None,
        help="Write the cluster membership table for this k.",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=RESULTS_ROOT,
        help="Root directory for outputs (default: Results/elbow).",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Re-run even if a summary already exists.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-run details.",
    )
    return parser.parse_args(argv)


def write_outputs(
    target_dir: Path,
    data: DataMatrix,
    sweep: SweepResult,
    *,
    chosen_k: int | None,
) -> None:
    """Write the sweep summary and, optionally, one membership table."""
    sweep.records.to_csv(target_dir / "sweep_summary.csv", index=False)

    if chosen_k is None:
        return
    result = sweep.result_for(chosen_k)
    membership_table(result, data).to_csv(target_dir / f"memberships_k{chosen_k:02d}.csv")
    cluster_counts(result.labels, k=chosen_k).to_csv(
        target_dir / f"cluster_sizes_k{chosen_k:02d}.csv", index=False
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.repeats < 1:
        raise SystemExit("--repeats must be at least 1.")
    if args.chosen_k is not None and not 1 <= args.chosen_k <= args.k_max:
        raise SystemExit("--k must lie in [1, --k-max].")

    data = load_matrix(args.matrix)
    if args.chosen_k is not None and args.chosen_k > data.n_samples:
        raise SystemExit(
            f"--k={args.chosen_k} exceeds the {data.n_samples} samples in {args.matrix.name}."
        )
    target_dir = args.out_dir / args.matrix.stem
    summary_path = target_dir / "sweep_summary.csv"
    if summary_path.exists() and not args.overwrite:
        print(f"[skip] {args.matrix.name} (results exist in {target_dir})")
        return
    target_dir.mkdir(parents=True, exist_ok=True)

    config = {
        "matrix": str(args.matrix),
        "n_samples": data.n_samples,
        "n_features": data.n_features,
        "k_max": args.k_max,
        "max_iter": args.max_iter,
        "seed": args.seed,
        "repeats": args.repeats,
        "n_jobs": args.n_jobs,
        "chosen_k": args.chosen_k,
        "timestamp": _dt.datetime.now().isoformat(),
    }
    (target_dir / "config.json").write_text(json.dumps(config, indent=2))

    print(f"[run]  {args.matrix.name}: n={data.n_samples}, p={data.n_features}, k=1..{args.k_max}")
    sweep = run_sweep(
        data,
        args.k_max,
        max_iter=args.max_iter,
        seed=args.seed,
        n_jobs=args.n_jobs,
    )
    write_outputs(target_dir, data, sweep, chosen_k=args.chosen_k)

    for k, wcss in sweep.wcss_curve().items():
        print(f"  k={k:>3}  wcss={wcss:.6g}")

    if args.repeats > 1:
        first = sweep.records
        first.insert(0, "sweep_seed", args.seed)
        seeds = [args.seed + offset for offset in range(1, args.repeats)]
        repeated = run_repeated_sweeps(
            data,
            args.k_max,
            seeds,
            max_iter=args.max_iter,
            n_jobs=args.n_jobs,
        )
        records = pd.concat([first, repeated], ignore_index=True)
        records.to_csv(target_dir / "repeated_sweeps.csv", index=False)
        summarize_sweeps(records).to_csv(target_dir / "elbow_summary.csv")
        print(f"[done] averaged {args.repeats} sweeps → {target_dir / 'elbow_summary.csv'}")


if __name__ == "__main__":
    main()
