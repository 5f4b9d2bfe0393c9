# checklist/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from .allocation import parse_distribution
from .catalog_fetch import CatalogSource
from .config import CATALOG_API_URL, DEFAULT_PEOPLE, DIST_DIR, AttendeeRecord, DistributionEntry, RequestMode
from .errors import ChecklistError
from .pipeline import generate_checklist
from .roster import backup_records, load_roster
from .sampling import Shuffler


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="checklist",
        description="Build per-reviewer fact-checking worksheets from the article catalog.",
    )
    ap.add_argument("-p", "--people", type=int, default=None,
                    help=f"Number of reviewers (default: roster size, else {DEFAULT_PEOPLE})")
    ap.add_argument("-n", "--number", type=int,
                    help="Articles per reviewer, drawn from not-replied or low-feedback articles")
    ap.add_argument("-f", "--fnumber", type=int,
                    help="Articles per reviewer, drawn only from replies without positive feedback")
    ap.add_argument("-r", "--rnumber", type=int,
                    help="Articles per reviewer, drawn only from not-replied articles")
    ap.add_argument("-d", "--distribution", action="append", metavar="QUOTA:PEOPLE",
                    help="Repeatable; e.g. -d 10:2 -d 5:3")
    ap.add_argument("--roster", type=Path, help="Attendee export (CSV/XLSX) used to name sheets")
    ap.add_argument("--backup", type=int, default=0, help="Extra backup seats appended to the roster")
    ap.add_argument("--out-dir", type=Path, default=DIST_DIR)
    ap.add_argument("--api-url", default=CATALOG_API_URL)
    ap.add_argument("--seed", type=int, default=None, help="Seed the shuffler for a reproducible run")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def plan_runs(args: argparse.Namespace, people: int) -> List[Tuple[List[DistributionEntry], RequestMode]]:
    """Every requested workbook, in n, f, r, d order. Tokens are parsed here, before any fetch."""
    runs: List[Tuple[List[DistributionEntry], RequestMode]] = []
    for value, mode in (
        (args.number, RequestMode.BOTH),
        (args.fnumber, RequestMode.FEEDBACK),
        (args.rnumber, RequestMode.REPLY),
    ):
        if value:
            runs.append((parse_distribution([f"{value}:{people}"]), mode))
    if args.distribution:
        runs.append((parse_distribution(args.distribution), RequestMode.BOTH))
    return runs


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    if not (args.number or args.fnumber or args.rnumber or args.distribution):
        ap.error("nothing to generate; pass -n, -f, -r or -d")
    if args.backup < 0:
        ap.error("--backup must be >= 0")

    try:
        roster: Optional[List[AttendeeRecord]] = None
        if args.roster is not None:
            roster = load_roster(args.roster) + backup_records(args.backup)

        people = args.people
        if people is None:
            people = len(roster) if roster else DEFAULT_PEOPLE

        runs = plan_runs(args, people)
        source = CatalogSource(api_url=args.api_url)
        shuffler = Shuffler(args.seed)
        for distribution, mode in runs:
            generate_checklist(
                distribution,
                mode,
                source=source,
                shuffler=shuffler,
                roster=roster,
                dist_dir=args.out_dir,
            )
    except (ChecklistError, FileNotFoundError) as e:
        logger.error("{}", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
