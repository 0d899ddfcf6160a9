"""Rich renderables for the CLI commands."""

from __future__ import annotations

from collections.abc import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ActionItem, CandidateItem, PlanItem, TopSkill
from core.interfaces.notifier import Notifier, Severity

_SEVERITY_STYLE = {
    Severity.SUCCESS: "bold green",
    Severity.INFO: "bold cyan",
    Severity.ERROR: "bold red",
}


class ConsoleNotifier(Notifier):
    """Renders notifications as single coloured lines (terminal toasts)."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self.history: list[tuple[str, str, Severity]] = []

    def notify(self, title: str, message: str, severity: Severity) -> None:
        self.history.append((title, message, severity))
        line = Text.assemble((f"{title}: ", _SEVERITY_STYLE.get(severity, "bold")), message)
        self._console.print(line)

    @property
    def had_error(self) -> bool:
        return any(severity is Severity.ERROR for _, _, severity in self.history)


def print_banner(console: Console) -> None:
    title = Text("SkillSync", style="bold cyan")
    subtitle = Text("Learning plans • Project readiness", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _num(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:g}"


def build_top_skills_table(skills: Sequence[TopSkill], *, hidden: int = 0) -> Table:
    table = Table(title="Top Skills", caption=f"{hidden} more (use --all)" if hidden else None)
    table.add_column("Skill", style="cyan", no_wrap=True)
    table.add_column("Required", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("Gap", style="yellow", justify="right")
    for skill in skills:
        table.add_row(skill.skill_name, _num(skill.required_level), _num(skill.current_level), _num(skill.gap))
    return table


def build_actions_table(actions: Sequence[ActionItem], *, title: str, hidden: int = 0) -> Table:
    table = Table(title=title.strip(), caption=f"{hidden} more (use --all)" if hidden else None)
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Action", style="white")
    table.add_column("Skill", style="cyan")
    table.add_column("Type")
    table.add_column("In plan", style="green")
    for action in actions:
        name = Text(action.name)
        if action.expanded:
            if action.description:
                name.append(f"\n{action.description}", style="dim")
            if action.url:
                name.append(f"\n{action.url}", style="magenta")
            if action.duration_hours is not None:
                name.append(f"\n~{_num(action.duration_hours)} h", style="dim")
        table.add_row(
            action.action_id,
            name,
            action.skill_name or "-",
            action.action_type or "-",
            "yes" if action.in_plan else "",
        )
    return table


def build_plan_table(plan: Sequence[PlanItem], *, title: str) -> Table:
    table = Table(title=title.strip())
    table.add_column("Plan item", style="dim", no_wrap=True)
    table.add_column("Action", style="white")
    table.add_column("Skill", style="cyan")
    table.add_column("Status", style="yellow")
    for item in plan:
        table.add_row(item.id, item.action_name or item.action_id or "-", item.skill_name or "-", item.status)
    return table


def build_candidates_table(candidates: Sequence[CandidateItem]) -> Table:
    table = Table(title="Candidates")
    table.add_column("Employee", style="white")
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Gap score", justify="right")
    table.add_column("Ready", style="green")
    table.add_column("Deficits", style="yellow")
    for candidate in candidates:
        deficits = ", ".join(f"{row.skill_name} ({_num(row.deficit)})" for row in candidate.deficits)
        table.add_row(
            candidate.employee_name or "-",
            candidate.employee_id,
            _num(candidate.gap_score),
            "yes" if candidate.is_ready else "no",
            deficits or "-",
        )
    return table


def build_breakdown_panel(candidate: CandidateItem) -> Panel:
    """Per-candidate deficit breakdown, shown when the candidate is expanded."""

    table = Table(show_edge=False)
    table.add_column("Skill", style="cyan")
    if candidate.gap_rows:
        for name in ("Required", "Has", "Deficit", "Importance", "Weight", "Penalty", "Share %"):
            table.add_column(name, justify="right")
        table.add_column("Reason", style="dim")
        for row in candidate.gap_rows:
            table.add_row(
                row.skill_name,
                _num(row.required_level),
                _num(row.has_level),
                _num(row.deficit),
                row.importance or "-",
                _num(row.weight),
                _num(row.penalty),
                _num(row.penalty_share),
                row.reason or "",
            )
    else:
        table.add_column("Deficit", justify="right")
        for row in candidate.deficits:
            table.add_row(row.skill_name, _num(row.deficit))

    body = Table.grid()
    if candidate.details:
        body.add_row(Text(candidate.details, style="dim"))
    body.add_row(table)
    title = Text(f"{candidate.employee_name or candidate.employee_id}", style="bold yellow")
    return Panel(body, title=title, border_style="yellow")
