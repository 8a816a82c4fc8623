"""
Command-line interface for child-subsidy.

Usage:
    child-subsidy calc --income 6000000 --child 5:first --child 2:second
    child-subsidy calc --income 6000000 --child 0 --jurisdiction tokyo --detail
    child-subsidy sweep --income 6000000 --birth-order third_or_more
    child-subsidy medical --age 5 --jurisdiction kanagawa
"""

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..catalog import DirectoryCatalog, resolve_jurisdiction
from ..config import EngineConfig, ReportConfig
from ..engine import SubsidyEngine, make_input
from ..errors import SubsidyCalcError
from ..formatting import format_man_yen, format_yen, validate_income
from ..medical import describe_medical_subsidy, medical_subsidy
from ..models import BirthOrder, Jurisdiction
from .tables import SubsidyReport, policy_frame, sweep_ages

BIRTH_ORDERS = [order.value for order in BirthOrder]


def parse_child(value: str):
    """Parse AGE[:BIRTH_ORDER], e.g. "5" or "2:second"."""
    age_text, _, order = value.partition(":")
    try:
        age = int(age_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid child age: {age_text!r}")
    order = order or BirthOrder.FIRST.value
    if order not in BIRTH_ORDERS:
        raise argparse.ArgumentTypeError(
            f"invalid birth order {order!r} (choose from {', '.join(BIRTH_ORDERS)})"
        )
    return age, order


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="child-subsidy",
        description="Estimate and rank child-support subsidies across jurisdictions",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "--catalog-dir",
        type=Path,
        help="Directory of <jurisdiction>.json catalogs (default: packaged data)",
    )
    parser.add_argument(
        "--third-child-monthly",
        type=int,
        default=EngineConfig.third_child_allowance_monthly,
        help="Child allowance for third and later children, yen per month (default: 30000)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Calc command
    calc_parser = subparsers.add_parser(
        "calc",
        help="Calculate and rank subsidies for a household",
    )
    calc_parser.add_argument(
        "--income",
        type=int,
        required=True,
        help="Household income in yen",
    )
    calc_parser.add_argument(
        "--child",
        type=parse_child,
        action="append",
        default=[],
        help="Child as AGE[:BIRTH_ORDER]; repeat for each child",
    )
    calc_parser.add_argument(
        "--jurisdiction",
        help="Only calculate this jurisdiction (key or name)",
    )
    calc_parser.add_argument(
        "--detail",
        action="store_true",
        help="Print every applied policy",
    )
    calc_parser.add_argument(
        "--top-n",
        type=int,
        default=ReportConfig.top_n,
        help="Policies listed per jurisdiction (default: 5)",
    )
    calc_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory to save the report and tables",
    )

    # Sweep command
    sweep_parser = subparsers.add_parser(
        "sweep",
        help="Rank jurisdictions for a single child at every age",
    )
    sweep_parser.add_argument("--income", type=int, required=True, help="Household income in yen")
    sweep_parser.add_argument(
        "--birth-order",
        choices=BIRTH_ORDERS,
        default=BirthOrder.FIRST.value,
        help="Birth order of the child (default: first)",
    )
    sweep_parser.add_argument(
        "--max-age",
        type=int,
        default=ReportConfig.max_sweep_age,
        help="Last age to calculate (default: 19)",
    )
    sweep_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    sweep_parser.add_argument("--output-dir", type=Path, help="Directory to save the sweep")

    # Medical command
    medical_parser = subparsers.add_parser(
        "medical",
        help="Estimate the pediatric medical subsidy",
    )
    medical_parser.add_argument("--age", type=int, required=True, help="Child's current age")
    medical_parser.add_argument(
        "--jurisdiction",
        help="Jurisdiction key or name (default: all)",
    )

    return parser


def _configure_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _run_calc(args, engine: SubsidyEngine):
    check = validate_income(args.income)
    if not check.is_valid:
        raise SubsidyCalcError(f"Invalid income: {check.error}")

    calc_input = make_input(args.income, args.child)
    if args.jurisdiction:
        results = [engine.calculate_for_jurisdiction(args.jurisdiction, calc_input)]
    else:
        results = engine.calculate_all(calc_input)

    report = SubsidyReport(
        calc_input=calc_input,
        results=results,
        config=ReportConfig(top_n=args.top_n),
    )
    print(report.detailed_report())

    if args.detail:
        print(policy_frame(results).to_string(index=False))

    if args.output_dir:
        report.save_report(args.output_dir)


def _run_sweep(args, engine: SubsidyEngine):
    check = validate_income(args.income)
    if not check.is_valid:
        raise SubsidyCalcError(f"Invalid income: {check.error}")

    config = ReportConfig(max_sweep_age=args.max_age, show_progress=not args.no_progress)
    sweep = sweep_ages(
        args.income,
        birth_order=BirthOrder(args.birth_order),
        engine=engine,
        config=config,
    )
    print(sweep.detailed_report())

    if args.output_dir:
        sweep.save_report(args.output_dir)


def _run_medical(args):
    jurisdictions = (
        [resolve_jurisdiction(args.jurisdiction)] if args.jurisdiction else list(Jurisdiction)
    )
    for jurisdiction in jurisdictions:
        total = medical_subsidy(args.age, jurisdiction)
        print(f"{jurisdiction.display_name}: {format_yen(total)} ({format_man_yen(total)})")
        print(f"  {describe_medical_subsidy(args.age, total, jurisdiction)}")


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose)

    catalog = DirectoryCatalog(args.catalog_dir) if args.catalog_dir else None
    engine = SubsidyEngine(
        catalog=catalog,
        config=EngineConfig(third_child_allowance_monthly=args.third_child_monthly),
    )

    try:
        if args.command == "calc":
            _run_calc(args, engine)
        elif args.command == "sweep":
            _run_sweep(args, engine)
        elif args.command == "medical":
            _run_medical(args)
    except SubsidyCalcError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
