"""
CLI Output Formatters

Tables and text blocks for dreams, time windows, imports and analyses.
"""

from typing import List, Sequence

from tabulate import tabulate

from dreamlog.core.models import Dream
from dreamlog.core.search import TagCloud
from dreamlog.ingest.orchestrator import BatchImportResult, ImportStatus
from dreamlog.insight.analysis import WindowAnalysis
from dreamlog.insight.windows import WindowSet
from dreamlog.llm.analysis import AnalysisResult


# Color codes for terminal output
class Colors:
    """ANSI color codes for terminal output."""
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"

    @staticmethod
    def green(text: str) -> str:
        return f"{Colors.OKGREEN}{text}{Colors.ENDC}"

    @staticmethod
    def red(text: str) -> str:
        return f"{Colors.FAIL}{text}{Colors.ENDC}"

    @staticmethod
    def yellow(text: str) -> str:
        return f"{Colors.WARNING}{text}{Colors.ENDC}"

    @staticmethod
    def bold(text: str) -> str:
        return f"{Colors.BOLD}{text}{Colors.ENDC}"


def truncate(text: str, max_length: int = 80, suffix: str = "...") -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def format_dream_table(dreams: Sequence[Dream], show_headers: bool = True) -> str:
    """
    Format dreams as a table, one row per dream.

    Args:
        dreams: Dreams to show (already ordered)
        show_headers: Whether to show table headers

    Returns:
        Formatted table string
    """
    if not dreams:
        return "No dreams found."

    headers = ["ID", "Date", "Title", "Tags", "People"]
    rows = [
        [
            d.id[:8],
            d.date.isoformat(),
            truncate(d.title, 40),
            ", ".join(d.tags[:3]),
            ", ".join(d.people[:3]),
        ]
        for d in dreams
    ]
    return tabulate(rows, headers=headers if show_headers else [], tablefmt="grid")


def format_dream_detail(dream: Dream) -> str:
    lines = [
        Colors.bold(dream.title),
        f"Date:   {dream.date.isoformat()}",
        f"ID:     {dream.id}",
    ]
    if dream.tags:
        lines.append(f"Tags:   {', '.join(dream.tags)}")
    if dream.people:
        lines.append(f"People: {', '.join(dream.people)}")
    lines.append("")
    lines.append(dream.description)
    return "\n".join(lines)


def format_windows(windows: WindowSet) -> str:
    """One row per window with its unlock state and what is still missing."""
    rows = []
    for w in windows:
        state = Colors.green("unlocked") if w.is_unlocked else Colors.yellow("locked")
        rows.append([w.label, len(w.dreams), state, w.progress_message])
    return tabulate(rows, headers=["Window", "Dreams", "State", "Progress"], tablefmt="simple")


def format_import_result(result: BatchImportResult) -> str:
    color = Colors.green if result.success and result.imported else Colors.yellow
    if not result.success:
        color = Colors.red
    lines = [color(result.message)]
    if result.success:
        lines.append(
            f"  Imported: {len(result.imported)}  Skipped: {result.skipped}  "
            f"Failed: {result.failed}"
        )
        for outcome in result.outcomes:
            if outcome.status == ImportStatus.FAILED:
                lines.append(f"  {Colors.red('x')} {outcome.name}: {outcome.reason}")
    return "\n".join(lines)


def format_tag_cloud(cloud: TagCloud, hidden: Sequence[str] = ()) -> str:
    if cloud.is_empty and not hidden:
        return "No tags or people yet."
    lines: List[str] = []
    if cloud.people:
        lines.append(Colors.bold("People:"))
        lines.append("  " + ", ".join(cloud.people))
    if cloud.tags:
        lines.append(Colors.bold("Tags:"))
        lines.append("  " + ", ".join(cloud.tags))
    if hidden:
        lines.append(Colors.bold("Hidden:"))
        lines.append("  " + ", ".join(hidden))
    return "\n".join(lines)


def format_analysis(result: AnalysisResult) -> str:
    """Render a pattern analysis as a readable report."""
    if result.is_empty:
        return "No analysis available (is an enrichment provider configured?)."

    lines = [Colors.bold("Summary:"), f"  {result.summary}", ""]

    core = result.core_elements
    if core.primary_symbols:
        lines.append(Colors.bold("Symbols:"))
        for s in core.primary_symbols:
            lines.append(f"  - {s.symbol}: {s.interpretations}")
    if core.characters:
        lines.append(Colors.bold("Characters:"))
        for c in core.characters:
            lines.append(f"  - {c.character}: {c.role}")
    if core.setting_and_atmosphere:
        lines.append(Colors.bold("Setting:"))
        lines.append(f"  {core.setting_and_atmosphere}")

    if result.themes:
        lines.append(Colors.bold("Themes:"))
        lines.append("  " + ", ".join(result.themes))

    for reading in result.interpretations:
        lines.append(Colors.bold(f"{reading.lens}:"))
        lines.append(f"  {reading.analysis}")

    if result.reflective_questions:
        lines.append(Colors.bold("Questions to reflect on:"))
        for i, q in enumerate(result.reflective_questions, 1):
            lines.append(f"  {i}. {q}")

    return "\n".join(lines)


def format_window_analyses(analyses: Sequence[WindowAnalysis]) -> str:
    blocks = []
    for item in analyses:
        header = "=" * 50 + "\n" + Colors.bold(item.window.label) + "\n" + "=" * 50
        if item.is_locked:
            body = Colors.yellow(item.window.progress_message)
        elif item.error:
            body = Colors.red(item.error)
        else:
            body = format_analysis(item.result)
        blocks.append(f"{header}\n{body}")
    return "\n\n".join(blocks)
