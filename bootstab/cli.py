"""Command-line entry point for bootstrap stability analyses.

Modes
-----
- run      : run the analysis on a delimited file and write result tables as CSV
- simulate : write a synthetic dataset with correlated predictors
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from bootstab.analysis.stability import run_stability_analysis
from bootstab.data.simulation import simulate_regression_data
from bootstab.data.tabular_dataset import TabularDataset
from bootstab.errors import BootstabError
from bootstab.utils.config import DEFAULT_CONFIG, StabilityConfig


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bootstab", description="Bootstrap stability of backward elimination")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG logging")
    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the stability analysis on a data file")
    run.add_argument("data", type=Path, help="Delimited file with a header row")
    run.add_argument("--outcome", required=True, help="Response column")
    run.add_argument("--forced", nargs="*", default=[], help="Predictors never eliminated")
    run.add_argument(
        "--candidates",
        nargs="*",
        default=None,
        help="Predictors subject to elimination (default: all other numeric columns)",
    )
    run.add_argument("--sep", default=",", help="Field delimiter")
    run.add_argument("--bootstrap", type=int, default=DEFAULT_CONFIG.n_bootstrap, help="Number of resamples")
    run.add_argument("--seed", type=int, default=DEFAULT_CONFIG.seed, help="Root random seed")
    run.add_argument("--alpha", type=float, default=DEFAULT_CONFIG.alpha, help="Pairwise test level")
    run.add_argument("--criterion", choices=["aic", "bic"], default=DEFAULT_CONFIG.criterion)
    run.add_argument("--jobs", type=int, default=1, help="Worker threads for bootstrap iterations")
    run.add_argument("--decimals", type=int, default=4, help="Rounding of the printed overview")
    run.add_argument("--out", type=Path, default=None, help="Directory for CSV tables")

    sim = sub.add_parser("simulate", help="Write a synthetic dataset")
    sim.add_argument("out", type=Path, help="Output CSV path")
    sim.add_argument("--rows", type=int, default=50)
    sim.add_argument("--forced", type=int, default=3)
    sim.add_argument("--candidates", type=int, default=5)
    sim.add_argument("--rho", type=float, default=0.5)
    sim.add_argument("--seed", type=int, default=42)
    return p


def _run(args: argparse.Namespace) -> int:
    dataset = TabularDataset.from_csv(args.data, target_col=args.outcome, forced_cols=args.forced, sep=args.sep)
    config = StabilityConfig(
        n_bootstrap=args.bootstrap,
        seed=args.seed,
        alpha=args.alpha,
        criterion=args.criterion,
        n_jobs=args.jobs,
    )
    result = run_stability_analysis(dataset, forced=args.forced, candidates=args.candidates, config=config)

    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(result.overview.round(args.decimals))
        print()
        print(result.model_frequencies.drop(columns=result.inclusion.order).round(args.decimals))
    if result.selected_model_frequency is not None:
        print(f"\nSelected model reproduced in {result.selected_model_frequency:.1f}% of resamples")
    print(f"EPV: {result.epv:.1f}")

    if args.out is not None:
        result.export(args.out)
    return 0


def _simulate(args: argparse.Namespace) -> int:
    dataset = simulate_regression_data(
        n_obs=args.rows,
        n_forced=args.forced,
        n_candidates=args.candidates,
        rho=args.rho,
        seed=args.seed,
    )
    args.out.parent.mkdir(parents=True, exist_ok=True)
    dataset.df.to_csv(args.out, index=False)
    logger.info("Wrote %d rows to %s", len(dataset.df), args.out)
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    args = _build_parser().parse_args(list(argv) if argv is not None else None)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "run":
            return _run(args)
        return _simulate(args)
    except (BootstabError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
