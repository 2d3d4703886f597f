"""CLI tool for place name matching."""

import argparse
from pathlib import Path

import pandas as pd
import structlog

from placematch.logging import configure_logging
from placematch.matcher import PlaceMatcher
from placematch.resources import ResourceStore


def _unit_interval(value: str) -> float:
    number = float(value)
    if not 0.0 <= number <= 1.0:
        raise argparse.ArgumentTypeError(f"must be between 0 and 1, got {value}")
    return number


def _non_negative(value: str) -> float:
    number = float(value)
    if number < 0.0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return number


def _build_matcher(args: argparse.Namespace) -> PlaceMatcher:
    """Build a PlaceMatcher from CLI args."""
    log = structlog.get_logger()
    matcher = PlaceMatcher(resources=ResourceStore.load(args.data_dir))

    if getattr(args, "threshold", None) is not None:
        matcher.set_threshold(args.threshold)
    if getattr(args, "weights", None):
        matcher.set_weights(*args.weights)

    scoring = matcher.config.scoring
    log.debug(
        "build_matcher_done",
        threshold=matcher.config.thresholds.match,
        surface=scoring.surface,
        token=scoring.token,
        phonetic=scoring.phonetic,
        stopwords=len(matcher.resources.stopwords),
        idf_tokens=len(matcher.resources.idf_table),
    )
    return matcher


def cmd_compare(args: argparse.Namespace) -> None:
    matcher = _build_matcher(args)
    result = matcher.is_same_place(args.name1, args.name2)

    decision = "MATCH" if result.is_match else "NO_MATCH"
    print(f"{decision}  score={result.score:.4f}  threshold={matcher.config.thresholds.match}")

    if args.explain:
        print(f"  clean 1: {result.clean1!r}")
        print(f"  clean 2: {result.clean2!r}")
        for name, value in result.features.items():
            print(f"  {name}: {value:.4f}")
        print(f"  reasons: {', '.join(result.reasons) or '-'}")


def cmd_normalize(args: argparse.Namespace) -> None:
    matcher = _build_matcher(args)
    for name in args.names:
        place = matcher.normalize(name)
        print(f"{place.original} -> {place.clean!r}")
        if place.removed_stopwords:
            print(f"  removed: {', '.join(place.removed_stopwords)}")


def _read_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".jsonl":
        return pd.read_json(path, lines=True, dtype=False)
    if path.suffix in (".xlsx", ".xls"):
        return pd.read_excel(path, dtype=str)
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def _write_table(df: pd.DataFrame, path: Path) -> None:
    if path.suffix == ".jsonl":
        df.to_json(path, orient="records", lines=True, force_ascii=False)
    elif path.suffix in (".xlsx", ".xls"):
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False)


def cmd_pairs(args: argparse.Namespace) -> None:
    """Score every row of a table holding one name pair per row."""
    log = structlog.get_logger()
    input_path = Path(args.input)
    df = _read_table(input_path)

    missing = [c for c in (args.left, args.right) if c not in df.columns]
    if missing:
        raise SystemExit(
            f"Column(s) {', '.join(missing)} not found in {input_path}. "
            f"Available: {', '.join(map(str, df.columns))}"
        )

    log.info("pairs_loaded", path=str(input_path), rows=len(df))
    lefts = df[args.left].fillna("").astype(str).tolist()
    rights = df[args.right].fillna("").astype(str).tolist()

    matcher = _build_matcher(args)
    results = matcher.score_pairs(zip(lefts, rights))

    df_out = df.copy()
    df_out["clean_1"] = [r.clean1 for r in results]
    df_out["clean_2"] = [r.clean2 for r in results]
    df_out["score"] = [round(r.score, 4) for r in results]
    df_out["decision"] = ["MATCH" if r.is_match else "NO_MATCH" for r in results]
    df_out["reasons"] = ["; ".join(r.reasons) for r in results]

    if args.show:
        _show_matches(df_out, args.left, args.right)

    _print_summary(df_out)
    _print_stats(matcher)

    output_path = Path(args.output)
    _write_table(df_out, output_path)
    print(f"\nSaved to: {output_path}")


def _show_matches(df: pd.DataFrame, left: str, right: str) -> None:
    matches = df[df["decision"] == "MATCH"]
    if matches.empty:
        print("\n=== No matches found ===")
        return
    print(f"\n=== Matches ({len(matches)}) ===")
    print(matches[[left, right, "score"]].to_string(index=False))


def _print_summary(df: pd.DataFrame) -> None:
    match_count = (df["decision"] == "MATCH").sum()
    no_match_count = (df["decision"] == "NO_MATCH").sum()
    print(f"\nResults: MATCH={match_count}, NO_MATCH={no_match_count}")


def _print_stats(matcher: PlaceMatcher) -> None:
    s = matcher.stats
    print("\n--- Statistics ---")
    print(f"Pairs: {s.pairs}")
    print(f"Matches: {s.matches}")
    print(f"Exact clean matches: {s.exact_matches}")
    print(f"Empty after normalization: {s.empty_inputs}")
    print(f"Length skew rejections: {s.length_skews}")


def _global_options(suppress_defaults: bool) -> argparse.ArgumentParser:
    """Global options, accepted before or after the subcommand.

    The subcommand copies suppress their defaults so they do not overwrite a
    value already given before the subcommand.
    """
    options = argparse.ArgumentParser(add_help=False)
    options.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=argparse.SUPPRESS if suppress_defaults else "WARNING",
        help="Set logging level (default: WARNING)",
    )
    options.add_argument(
        "--data-dir",
        default=argparse.SUPPRESS if suppress_defaults else None,
        help="Directory holding stopwords.txt and idf_map.txt "
        "(default: $PLACEMATCH_DATA or the bundled data)",
    )
    return options


def build_parser() -> argparse.ArgumentParser:
    parent_parser = _global_options(suppress_defaults=True)

    scoring_parser = argparse.ArgumentParser(add_help=False)
    scoring_parser.add_argument(
        "--threshold", type=_unit_interval, default=None, help="Match threshold in [0, 1]"
    )
    scoring_parser.add_argument(
        "--weights",
        type=_non_negative,
        nargs=3,
        metavar=("SURFACE", "TOKEN", "PHONETIC"),
        default=None,
        help="Signal weights (use 0 for PHONETIC to disable it)",
    )

    parser = argparse.ArgumentParser(
        description="Place name matching CLI",
        parents=[_global_options(suppress_defaults=False)],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser(
        "compare", parents=[parent_parser, scoring_parser], help="Compare two place names"
    )
    compare_parser.add_argument("name1")
    compare_parser.add_argument("name2")
    compare_parser.add_argument(
        "--explain", action="store_true", help="Show clean names, signal scores and reasons"
    )
    compare_parser.set_defaults(func=cmd_compare)

    normalize_parser = subparsers.add_parser(
        "normalize", parents=[parent_parser], help="Show the clean form of place names"
    )
    normalize_parser.add_argument("names", nargs="+")
    normalize_parser.set_defaults(func=cmd_normalize)

    pairs_parser = subparsers.add_parser(
        "pairs", parents=[parent_parser, scoring_parser], help="Score a table of name pairs"
    )
    pairs_parser.add_argument("--input", required=True, help="CSV, JSONL or XLSX file of pairs")
    pairs_parser.add_argument("--output", required=True, help="Output file (format by suffix)")
    pairs_parser.add_argument("--left", default="name1", help="Column with the first name")
    pairs_parser.add_argument("--right", default="name2", help="Column with the second name")
    pairs_parser.add_argument("--show", action="store_true", help="Display matches on screen")
    pairs_parser.set_defaults(func=cmd_pairs)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
