#!/usr/bin/env python3
"""Interactive console for the feedback insights service.

This allows users to:
1. Submit feedback directly in the terminal
2. Run AI labeling over everything not yet analyzed
3. View aggregate stats and PM insights as tables
"""
import asyncio
import sys
from typing import List, Union
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box
from rich.prompt import Prompt

from database import init_db
from errors import FeedbackValidationError
from schemas import AggregatedStats, BatchResult, EmptyInsights, FeedbackEntry, Insights
from service import FeedbackService


console = Console()

SENTIMENT_STYLES = {"positive": "green", "negative": "red", "neutral": "white"}
URGENCY_STYLES = {"high": "bold red", "medium": "yellow", "low": "green"}


def _styled(value, styles) -> str:
    if not value:
        return "[dim]-[/dim]"
    style = styles.get(value, "white")
    return f"[{style}]{value}[/{style}]"


def _counts_table(title: str, counts: dict, styles=None) -> Table:
    table = Table(title=title, box=box.ROUNDED, header_style="bold magenta")
    table.add_column("Value", style="cyan")
    table.add_column("Count", justify="right")
    for value, count in sorted(counts.items(), key=lambda item: item[1], reverse=True):
        table.add_row(_styled(value, styles) if styles else value, str(count))
    return table


def render_stats(stats: AggregatedStats) -> List[Union[Panel, Table]]:
    """Build the renderables for an aggregated stats payload."""
    renderables = [
        Panel(
            f"[bold]{stats.total}[/bold] feedback entries across all channels",
            title="📊 Total Feedback",
            border_style="bold blue"
        ),
        _counts_table("By Source", stats.by_source),
        _counts_table("Sentiment", stats.by_sentiment, SENTIMENT_STYLES),
        _counts_table("Urgency", stats.by_urgency, URGENCY_STYLES),
    ]

    if stats.recent_urgent:
        urgent = Table(title="🚨 Recent Urgent", box=box.ROUNDED, header_style="bold red")
        urgent.add_column("ID", justify="right")
        urgent.add_column("Source", style="cyan")
        urgent.add_column("Feedback")
        for entry in stats.recent_urgent:
            urgent.add_row(str(entry.id), entry.source, entry.text)
        renderables.append(urgent)

    return renderables


def render_insights(insights: Union[Insights, EmptyInsights]) -> List[Union[Panel, Table]]:
    """Build the renderables for the PM insights view."""
    if isinstance(insights, EmptyInsights):
        return [Panel(insights.message, title="💡 Insights", border_style="yellow")]

    score_style = "green" if insights.sentiment_score >= 0 else "red"
    actions = "\n".join(f"→ {item}" for item in insights.action_items)
    renderables = [
        Panel(
            f"Sentiment score: [{score_style}]{insights.sentiment_score}[/{score_style}] "
            f"over {insights.analyzed_count} analyzed entries\n\n{actions}",
            title="💡 Action Items",
            border_style="bold blue",
            box=box.DOUBLE,
            padding=(1, 2)
        )
    ]

    if insights.top_priority_issues:
        issues = Table(title="🚨 Top Priority Issues", box=box.ROUNDED, header_style="bold red")
        issues.add_column("Source", style="cyan")
        issues.add_column("Themes")
        issues.add_column("Feedback")
        for issue in insights.top_priority_issues:
            issues.add_row(issue.source, issue.themes or "-", issue.text)
        renderables.append(issues)

    if insights.pain_points:
        pain = Table(title="Pain Points", box=box.ROUNDED, header_style="bold magenta")
        pain.add_column("Theme", style="cyan")
        pain.add_column("Count", justify="right")
        pain.add_column("Severity")
        for point in insights.pain_points:
            pain.add_row(point.theme, str(point.count), _styled(point.severity, URGENCY_STYLES))
        renderables.append(pain)

    if insights.theme_breakdown:
        themes = Table(title="Theme Breakdown", box=box.ROUNDED, header_style="bold magenta")
        themes.add_column("Theme", style="cyan")
        themes.add_column("Count", justify="right")
        themes.add_column("Sentiment")
        for theme in insights.theme_breakdown:
            themes.add_row(theme.theme, str(theme.count), _styled(theme.sentiment, SENTIMENT_STYLES))
        renderables.append(themes)

    if insights.quick_wins:
        wins = Table(title="⭐ Quick Wins", box=box.ROUNDED, header_style="bold green")
        wins.add_column("Source", style="cyan")
        wins.add_column("Feedback")
        for win in insights.quick_wins:
            wins.add_row(win.source, win.text)
        renderables.append(wins)

    return renderables


def render_feedback(entries: List[FeedbackEntry]) -> Table:
    """Table of feedback entries with their labels."""
    table = Table(title="Recent Feedback", box=box.ROUNDED, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Source", style="cyan")
    table.add_column("Sentiment")
    table.add_column("Urgency")
    table.add_column("Themes")
    table.add_column("Feedback")
    for entry in entries:
        table.add_row(
            str(entry.id),
            entry.source,
            _styled(entry.sentiment, SENTIMENT_STYLES),
            _styled(entry.urgency, URGENCY_STYLES),
            entry.themes or "[dim]-[/dim]",
            entry.text
        )
    return table


def render_batch_result(result: BatchResult) -> Panel:
    border = "green" if result.failed == 0 else "yellow"
    body = (
        f"{result.message}\n\n"
        f"Total: {result.analyzed}\n"
        f"Successful: [green]{result.successful}[/green]\n"
        f"Failed: [red]{result.failed}[/red]"
    )
    for item in result.results:
        if not item.success:
            body += f"\n  • #{item.id}: {item.error}"
    return Panel(body, title="🤖 Analyze All", border_style=border)


class InteractiveFeedbackConsole:
    """Menu-driven console over the feedback service."""

    MENU = {
        "1": "Submit feedback",
        "2": "Analyze all unanalyzed feedback",
        "3": "Show stats",
        "4": "Show insights",
        "5": "List recent feedback",
        "q": "Quit",
    }

    def __init__(self, service: FeedbackService = None):
        """Initialize the console."""
        self.service = service or FeedbackService()

    def display_welcome(self):
        """Display welcome message."""
        welcome = """
[bold cyan]Feedback Insights[/bold cyan]
[dim]Interactive Console[/dim]

Collect customer feedback, label it with AI and review:
  • Sentiment (positive, negative, neutral)
  • Themes (bug, feature-request, performance, ...)
  • Urgency (low, medium, high)
        """

        console.print(Panel(welcome, border_style="bold blue", box=box.DOUBLE, padding=(1, 2)))
        console.print()

    async def submit(self):
        source = Prompt.ask("Source", default="CLI")
        text = Prompt.ask("Feedback")
        try:
            entry = await self.service.submit_feedback(source, text)
        except FeedbackValidationError as e:
            console.print(f"[red]⚠️  {e}[/red]")
            return
        console.print(f"[dim]💾 Saved with ID: {entry.id}[/dim]")

    async def handle(self, choice: str) -> bool:
        """Run one menu choice; returns False when the user quits."""
        if choice == "1":
            await self.submit()
        elif choice == "2":
            console.print("[yellow]🤖 Analyzing...[/yellow]")
            console.print(render_batch_result(await self.service.analyze_all()))
        elif choice == "3":
            for renderable in render_stats(await self.service.get_stats()):
                console.print(renderable)
        elif choice == "4":
            for renderable in render_insights(await self.service.get_insights()):
                console.print(renderable)
        elif choice == "5":
            console.print(render_feedback(await self.service.list_feedback(limit=20)))
        else:
            console.print("\n[cyan]Goodbye![/cyan]\n")
            return False
        return True

    async def run_interactive(self):
        """Run the interactive console loop."""
        self.display_welcome()

        running = True
        while running:
            console.print()
            for key, label in self.MENU.items():
                console.print(f"  [bold]{key}[/bold]  {label}")
            choice = Prompt.ask("Choose", choices=list(self.MENU), default="3")
            running = await self.handle(choice)

            stats = self.service.cache.get_stats()
            console.print(
                f"\n[dim]Cache: {stats['hits']} hits, "
                f"{stats['misses']} misses, "
                f"{stats['size']} entries[/dim]"
            )


async def main():
    """Main entry point."""
    console.print("[cyan]Initializing database...[/cyan]")
    await init_db()

    system = InteractiveFeedbackConsole()

    try:
        await system.run_interactive()
    except KeyboardInterrupt:
        console.print("\n\n[cyan] Goodbye![/cyan]\n")
        sys.exit(0)


if __name__ == "__main__":
    asyncio.run(main())
