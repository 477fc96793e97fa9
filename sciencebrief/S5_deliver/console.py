"""Render a scored aggregation summary for humans and files."""

from datetime import datetime

from ..core import save_json, today
from ..models import AggregationSummary, Article
from ..S4_score import pitch_label

WIDTH = 66


def _score_str(article: Article) -> str:
    return str(article.pitch_score) if article.pitch_score is not None else "N/A"


def to_console(summary: AggregationSummary, articles: list[Article] | None = None) -> None:
    """
    Print formatted output to console.

    Args:
        summary: Aggregation result (used for the feed counts)
        articles: Articles to display; defaults to summary.articles
    """
    if articles is None:
        articles = summary.articles
    now = datetime.now().strftime("%Y-%m-%d %H:%M")

    print()
    print("=" * WIDTH)
    print(f"  The Science Brief | {now}")
    print("=" * WIDTH)
    print()

    for article in articles:
        print("-" * WIDTH)
        print(f"[{_score_str(article)}] {article.title[:WIDTH - 8]}")
        print(f"{article.journal} | {article.authors} | {article.date:%Y-%m-%d}")
        if article.pitch_score is not None:
            print(f"Pitch: {pitch_label(article.pitch_score)}")
        if article.keywords:
            print(f"Keywords: {', '.join(article.keywords)}")
        if article.suggested_publications:
            print(f"Outlets: {', '.join(article.suggested_publications)}")
        print(f"Link: {article.link or '(none)'}")
        print()

    print("=" * WIDTH)
    print(f" {summary.successful_feeds}/{summary.total_feeds} feeds succeeded | "
          f"{summary.total_articles} articles | showing {len(articles)}")
    for failed in summary.failed_feeds:
        print(f" ! {failed.feed_name}: {failed.error}")
    print("=" * WIDTH)


def to_json(summary: AggregationSummary, path: str) -> bool:
    """
    Export the summary (wire field names) to a JSON file.

    Returns:
        True if the file was written
    """
    return save_json(summary.to_dict(), path)


def to_markdown(summary: AggregationSummary, articles: list[Article] | None = None) -> str:
    """
    Generate markdown formatted output.

    Returns:
        Markdown string
    """
    if articles is None:
        articles = summary.articles
    lines = [f"# The Science Brief | {today()}\n"]
    lines.append(
        f"_{summary.successful_feeds}/{summary.total_feeds} feeds, "
        f"{summary.total_articles} articles_\n"
    )

    for article in articles:
        lines.append(f"## [{_score_str(article)}] {article.title}\n")
        lines.append(f"**{article.journal}** | {article.authors} | {article.date:%Y-%m-%d}\n")
        if article.description:
            lines.append(f"{article.description[:500]}{'...' if len(article.description) > 500 else ''}\n")
        if article.suggested_publications:
            lines.append(f"**Pitch to**: {', '.join(article.suggested_publications)}\n")
        if article.link:
            lines.append(f"[Read full study]({article.link})\n")
        lines.append("---\n")

    if summary.failed_feeds:
        lines.append("## Failed feeds\n")
        for failed in summary.failed_feeds:
            lines.append(f"- {failed.feed_name}: {failed.error}")

    return "\n".join(lines)
