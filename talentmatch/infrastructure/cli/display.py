import logging
from typing import Any, Dict, Sequence

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from talentmatch.domain.interfaces.user_interface import UserInterface
from talentmatch.domain.models.common import AnnotatedResult
from talentmatch.domain.models.resume import BatchItemResult, ResumeParsingResult

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Console = None):
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_output(self, output: str, **kwargs: Any) -> None:
        """Prints raw output (e.g. JSON) without decoration."""
        self.console.print(output, markup=False, highlight=False, soft_wrap=True)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_parse_result(
        self,
        result: AnnotatedResult[ResumeParsingResult],
        skill_categories: Dict[str, Sequence[str]],
    ) -> None:
        """Renders the parsed resume as a two-column table plus a skills table."""
        parsed = result.result
        resume = parsed.data

        if result.fallback:
            self.display_warning(f"Served by fallback provider '{result.provider}': {result.fallback_reason}")

        table = Table(show_header=False, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Field", style="bold cyan")
        table.add_column("Value", style="white")
        table.add_row("Provider", Text(result.provider))
        table.add_row("Processing time", f"{parsed.processing_time_ms:.0f} ms")
        if parsed.confidence is not None:
            table.add_row("Confidence", f"{parsed.confidence:.0%}")
        if resume is not None:
            table.add_row("Current role", Text(resume.current_role or "-"))
            table.add_row("Years of experience", str(resume.years_of_experience))
            table.add_row("Location", Text(resume.location or "-"))
            table.add_row("Summary", Text(resume.summary or "-"))
            table.add_row("Experience", Text(resume.experience or "-"))
            table.add_row("Education", Text(resume.education or "-"))
            if resume.languages:
                table.add_row("Languages", Text(", ".join(resume.languages)))
            if resume.certifications:
                table.add_row("Certifications", Text(", ".join(resume.certifications)))
            if resume.projects:
                table.add_row("Projects", Text(", ".join(resume.projects)))
        self.console.print(Panel(table, title="[bold cyan]Parsed Resume[/bold cyan]", border_style="cyan", box=ROUNDED))

        skills_table = Table(show_header=True, box=SIMPLE, border_style="cyan", padding=(0, 1))
        skills_table.add_column("Category", style="bold cyan")
        skills_table.add_column("Skills", style="white")
        for category, skills in skill_categories.items():
            if skills:
                skills_table.add_row(category.replace("_", " ").title(), Text(", ".join(skills)))
        if skills_table.row_count:
            self.console.print(skills_table)

    def display_batch_summary(self, results: Sequence[BatchItemResult]) -> None:
        table = Table(show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Resume", style="bold")
        table.add_column("Status")
        table.add_column("Provider")
        table.add_column("Details", style="dim")
        for item in results:
            if item.success and item.result is not None:
                details = item.result.fallback_reason or ""
                table.add_row(Text(item.id), "[green]ok[/green]", Text(item.result.provider), Text(details))
            else:
                table.add_row(Text(item.id), "[red]failed[/red]", "-", Text(item.error or ""))
        succeeded = sum(1 for item in results if item.success)
        self.console.print(Panel(
            table,
            title=f"[bold cyan]Batch Results[/bold cyan] [dim]({succeeded}/{len(results)} parsed)[/dim]",
            border_style="cyan",
            box=ROUNDED,
        ))
