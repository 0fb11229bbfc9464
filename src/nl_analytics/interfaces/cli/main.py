import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import colorlog
import pandas as pd
import yaml

from nl_analytics import __version__ as _PACKAGE_VERSION
from nl_analytics.cleaning.cleaner import generate_quality_report
from nl_analytics.engine import AnalyticsEngine
from nl_analytics.matching.synonyms import load_synonyms


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def load_schema(path: Path) -> Any:
    """Read a schema descriptor from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not hold a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        schema = yaml.safe_load(f)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema file must contain a mapping: {path}")
    return schema


def load_rows(path: Path) -> List[Dict[str, Any]]:
    """Read dataset rows from a CSV or JSON file.

    CSV cells are read as strings so that type inference is left to the
    cleaner; empty cells become empty strings.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the format is unsupported or JSON is not a list of objects.
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        return df.to_dict(orient="records")
    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise ValueError(f"JSON data must be a list of objects: {path}")
        return rows
    raise ValueError(f"Unsupported data format: {path.suffix} (expected .csv or .json)")


def _build_engine(args: argparse.Namespace) -> AnalyticsEngine:
    synonyms = None
    if getattr(args, "synonyms", None):
        synonyms = load_synonyms(Path(args.synonyms))
    return AnalyticsEngine(synonyms=synonyms)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def cmd_plan(args: argparse.Namespace) -> int:
    """Parse a question and print its intent and execution plan."""
    try:
        schema = load_schema(Path(args.schema))
        engine = _build_engine(args)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logging.error("%s", e)
        return 2

    analysis = engine.analyze_query(args.question, schema, args.db_type)
    if analysis.clarification_needed:
        logging.warning("Clarification needed: %s", analysis.suggested_clarification)
    _print_json(analysis.to_dict())
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Plan a question and execute it against a dataset file.

    Returns:
        0 on success
        1 if the analysis failed
        2 if an input file could not be read
    """
    try:
        schema = load_schema(Path(args.schema))
        rows = load_rows(Path(args.data))
        engine = _build_engine(args)
    except (FileNotFoundError, ValueError, yaml.YAMLError, pd.errors.ParserError) as e:
        logging.error("%s", e)
        return 2

    analysis = engine.analyze_query(args.question, schema, args.db_type)
    if analysis.clarification_needed:
        logging.warning("Clarification needed: %s", analysis.suggested_clarification)

    result = engine.execute_analytics(rows, analysis.plan)
    _print_json(result.to_dict())
    if not result.success:
        logging.error("Analysis failed: %s", result.error)
        return 1
    logging.info("Analysis produced %d rows", result.row_count)
    return 0


def cmd_profile(args: argparse.Namespace) -> int:
    """Print the data quality report of a dataset file."""
    try:
        rows = load_rows(Path(args.data))
    except (FileNotFoundError, ValueError, pd.errors.ParserError) as e:
        logging.error("%s", e)
        return 2

    report = generate_quality_report(rows)
    _print_json(report.to_dict())
    for issue in report.issues:
        logging.warning("%s", issue)
    return 1 if report.is_empty() else 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nl-analytics",
        description=f"Natural-language analytics engine (v{_PACKAGE_VERSION})",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )
    p.add_argument(
        "--synonyms",
        type=str,
        help="YAML file with extra synonyms ({synonyms: {term: [..]}})",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_plan = sub.add_parser("plan", help="Print the intent and execution plan of a question")
    p_plan.add_argument("question", type=str, help="Question in plain language")
    p_plan.add_argument("--schema", type=str, required=True, help="Schema file (YAML or JSON)")
    p_plan.add_argument("--db-type", type=str, default="file", help="Data source tag")
    p_plan.set_defaults(func=cmd_plan)

    p_run = sub.add_parser("run", help="Plan a question and execute it on a dataset")
    p_run.add_argument("question", type=str, help="Question in plain language")
    p_run.add_argument("--schema", type=str, required=True, help="Schema file (YAML or JSON)")
    p_run.add_argument("--data", type=str, required=True, help="Dataset file (.csv or .json)")
    p_run.add_argument("--db-type", type=str, default="file", help="Data source tag")
    p_run.set_defaults(func=cmd_run)

    p_profile = sub.add_parser("profile", help="Print a data quality report")
    p_profile.add_argument("--data", type=str, required=True, help="Dataset file (.csv or .json)")
    p_profile.set_defaults(func=cmd_profile)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
