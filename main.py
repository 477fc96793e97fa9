"""The Science Brief - journal feed digest with pitch scoring."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from sciencebrief import S3_aggregate as aggregate
from sciencebrief import S4_score as scoring
from sciencebrief import S5_deliver as deliver
from sciencebrief.core import today
from sciencebrief.models import AggregationSummary
from sciencebrief.S2_fetch import custom_descriptor
from sciencebrief.registry import CATEGORY_LABELS, RegistryError, load_registry

EXIT_USAGE = 2


# ─────────────────────────────────────────────────────────────
# Logging setup
# ─────────────────────────────────────────────────────────────

def setup_logging(log_dir: str = "logs"):
    """Configure logging to file."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    log_file = log_path / f"{today()}.log"

    # File handler (detailed)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S"
    ))

    # Configure root logger
    logging.basicConfig(
        level=logging.INFO,
        handlers=[file_handler]
    )

    return log_file


# ─────────────────────────────────────────────────────────────
# Output formatting
# ─────────────────────────────────────────────────────────────

def print_header():
    """Print run header."""
    now = datetime.now().strftime("%Y-%m-%d %H:%M")
    print()
    print("=" * 62)
    print("              The Science Brief - Journal Digest              ")
    print(f"                     {now}                       ")
    print("=" * 62)
    print()


def print_detail(key: str, value, indent: int = 1):
    """Print a detail line."""
    prefix = "|  " * indent
    print(f"{prefix}- {key}: {value}")


def print_table(headers: list[str], rows: list[list], indent: int = 1):
    """Print a simple table."""
    prefix = "|  " * indent
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    header_line = "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    print(f"{prefix}{header_line}")
    print(f"{prefix}{'-' * len(header_line)}")

    for row in rows:
        row_line = "  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row))
        print(f"{prefix}{row_line}")


def feed_rows(summary: AggregationSummary) -> list[list]:
    """Per-feed article counts; failed feeds are marked."""
    counts: dict[str, int] = {}
    for article in summary.articles:
        counts[article.journal] = counts.get(article.journal, 0) + 1
    rows = [[journal, cnt] for journal, cnt in sorted(counts.items(), key=lambda x: -x[1])]
    rows.extend([f.feed_name, "FAILED"] for f in summary.failed_feeds)
    return rows


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="The Science Brief - journal feed digest with pitch scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # All enabled default feeds
  python main.py --categories music,perception    # Some categories only
  python main.py --sort score --tier high         # Best pitches first
  python main.py --url https://www.nature.com/neuro.rss
        """
    )

    parser.add_argument(
        "--categories",
        type=str,
        default=None,
        help="Comma-separated registry categories (default: all)"
    )

    parser.add_argument(
        "--url",
        type=str,
        action="append",
        default=None,
        help="Fetch an ad-hoc feed URL instead of the registry (repeatable)"
    )

    parser.add_argument(
        "--feeds-file",
        type=str,
        default=None,
        help="Feed registry YAML (default: $SCIENCEBRIEF_FEEDS_FILE or config/feeds.yaml)"
    )

    parser.add_argument(
        "--sort",
        choices=scoring.SORT_KEYS,
        default="date",
        help="Order of the digest (default: date)"
    )

    parser.add_argument(
        "--tier",
        choices=scoring.TIER_FILTERS,
        default="all",
        help="Only show one pitch tier (default: all)"
    )

    parser.add_argument(
        "--top",
        type=int,
        default=20,
        help="Number of articles to print (default: 20)"
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the scored summary as JSON to this path"
    )

    parser.add_argument(
        "--markdown",
        type=str,
        default=None,
        help="Write a Markdown digest to this path"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print the digest to the console"
    )

    return parser.parse_args(argv)


def run(args=None) -> int:
    """Fetch, score and deliver one digest. Returns the exit code."""
    if args is None:
        args = parse_args()

    log_file = setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("The Science Brief started")

    if not args.quiet:
        print_header()

    # Resolve feeds
    try:
        if args.url:
            descriptors = [custom_descriptor(url, feed_id=f"custom-{i}") for i, url in enumerate(args.url)]
        else:
            registry = load_registry(args.feeds_file)
            descriptors = aggregate.resolve_descriptors(registry, categories=args.categories)
    except RegistryError as e:
        logger.error(f"Registry error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    # Fetch
    try:
        summary = aggregate.aggregate(descriptors)
    except aggregate.EmptyFeedListError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    # Score, order, filter
    articles = scoring.score_articles(summary.articles)
    summary = summary.model_copy(update={"articles": articles})
    shown = scoring.filter_by_tier(scoring.sort_articles(articles, by=args.sort), args.tier)
    if args.top and len(shown) > args.top:
        shown = shown[:args.top]

    if not args.quiet:
        categories = sorted({d.category for d in descriptors if d.category})
        if categories:
            print_detail("Categories", ", ".join(CATEGORY_LABELS.get(c, c) for c in categories))
        print_detail("Feeds", f"{summary.successful_feeds}/{summary.total_feeds} succeeded")
        print_detail("Articles", summary.total_articles)
        rows = feed_rows(summary)
        if rows:
            print_table(["Journal", "Articles"], rows)
        deliver.to_console(summary, shown)

    # Save outputs
    if args.output:
        deliver.to_json(summary, args.output)
        logger.info(f"JSON saved to {args.output}")
    if args.markdown:
        md_path = Path(args.markdown)
        md_path.parent.mkdir(parents=True, exist_ok=True)
        md_path.write_text(deliver.to_markdown(summary, shown), encoding="utf-8")
        logger.info(f"Markdown saved to {md_path}")

    logger.info(
        f"The Science Brief completed: {summary.total_articles} articles, "
        f"{len(summary.failed_feeds)} failed feeds"
    )
    if not args.quiet:
        print(f"[OK] Done! (log: {log_file})")
    return 0


if __name__ == "__main__":
    load_dotenv()
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
