"""SkillSync command line (Typer + Rich).

The commands are thin: they build a backend adapter and a view controller,
drive it like a UI would (load, toggle, mutate) and render the result.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.backend_client import HttpBackend
from adapters.json_exporter import export_candidates_json, export_recommendations_json
from cli import doctor
from cli.ui_components import (
    ConsoleNotifier,
    build_actions_table,
    build_breakdown_panel,
    build_candidates_table,
    build_plan_table,
    build_top_skills_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.state import MutationOutcome
from core.services.learning_view import EmployeeLearningView
from core.services.readiness_view import ProjectReadinessView

app = typer.Typer(no_args_is_help=True, help="Learning plans and project readiness from the terminal.")
learning_app = typer.Typer(no_args_is_help=True, help="Employee learning recommendations and plan.")
readiness_app = typer.Typer(no_args_is_help=True, help="Project candidate readiness and assignments.")

app.add_typer(learning_app, name="learning")
app.add_typer(readiness_app, name="readiness")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    banner: bool = typer.Option(False, "--banner", help="Print the banner first."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    if banner:
        print_banner(_console)


def _exit_on_failure(outcome: MutationOutcome) -> None:
    if not outcome.ok:
        raise typer.Exit(code=1)


def _render_learning(view: EmployeeLearningView) -> None:
    if view.error:
        _console.print(f"[red]Could not load recommendations:[/red] {view.error}")
        return

    _console.print(
        build_top_skills_table(
            view.visible_top_skills,
            hidden=len(view.top_skills) - len(view.visible_top_skills),
        )
    )
    _console.print(
        build_actions_table(
            view.visible_recommended_actions,
            title=view.tab_label_recommendations,
            hidden=len(view.recommended_actions) - len(view.visible_recommended_actions),
        )
    )
    _console.print(build_plan_table(view.my_plan, title=view.tab_label_plan))


def _render_readiness(view: ProjectReadinessView) -> None:
    if view.error:
        _console.print(f"[red]Could not evaluate project:[/red] {view.error}")
        return
    if not view.has_results:
        return
    _console.print(build_candidates_table(view.candidates))
    for candidate in view.candidates:
        if candidate.expanded:
            _console.print(build_breakdown_panel(candidate))


# ---------- learning ----------


@learning_app.command("show")
def learning_show(
    employee_id: str = typer.Argument(..., help="Employee record id."),
    show_all: bool = typer.Option(False, "--all", help="Show every top skill and action."),
    expand: list[str] = typer.Option([], "--expand", help="Action id to show in detail (repeatable)."),
    top_skills: Optional[int] = typer.Option(None, "--top-skills", min=1, help="Top skills to request."),
    actions_per_skill: Optional[int] = typer.Option(None, "--actions-per-skill", min=1),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Also write the view as JSON."),
) -> None:
    """Show recommendations and the current learning plan."""

    settings = AppSettings()

    async def _run() -> EmployeeLearningView:
        async with HttpBackend(settings) as backend:
            view = EmployeeLearningView(backend, ConsoleNotifier(_console), settings)
            await view.load(employee_id, top_skill_count=top_skills, actions_per_skill=actions_per_skill)
            view.close()
            return view

    view = asyncio.run(_run())
    if show_all:
        view.toggle_top_skills()
        view.toggle_actions()
    for action_id in expand:
        view.toggle_action(action_id)

    _render_learning(view)
    if json_out and not view.error:
        path = export_recommendations_json(employee_id=employee_id, view=view.view, output_path=json_out)
        _console.print(f"[green]JSON written to:[/green] {path}")
    if view.error:
        raise typer.Exit(code=1)


@learning_app.command("add")
def learning_add(
    employee_id: str = typer.Argument(..., help="Employee record id."),
    action_id: str = typer.Argument(..., help="Learning action id to add to the plan."),
) -> None:
    """Add a recommended learning action to the employee's plan."""

    settings = AppSettings()

    async def _run() -> tuple[EmployeeLearningView, MutationOutcome]:
        async with HttpBackend(settings) as backend:
            view = EmployeeLearningView(backend, ConsoleNotifier(_console), settings)
            await view.load(employee_id)
            outcome = await view.add_to_plan(action_id)
            view.close()
            return view, outcome

    view, outcome = asyncio.run(_run())
    _console.print(build_plan_table(view.my_plan, title=view.tab_label_plan))
    _exit_on_failure(outcome)


@learning_app.command("status")
def learning_status(
    plan_item_id: str = typer.Argument(..., help="Plan item id."),
    status: str = typer.Argument(..., help="Not Started | In Progress | Completed | Approved"),
    employee_id: str = typer.Option(..., "--employee", "-e", help="Owner of the plan (for the refresh)."),
) -> None:
    """Change the status of a plan item."""

    settings = AppSettings()

    async def _run() -> tuple[EmployeeLearningView, MutationOutcome]:
        async with HttpBackend(settings) as backend:
            view = EmployeeLearningView(backend, ConsoleNotifier(_console), settings)
            await view.load(employee_id)
            outcome = await view.update_status(plan_item_id, status)
            view.close()
            return view, outcome

    view, outcome = asyncio.run(_run())
    _console.print(build_plan_table(view.my_plan, title=view.tab_label_plan))
    _exit_on_failure(outcome)


# ---------- readiness ----------


@readiness_app.command("evaluate")
def readiness_evaluate(
    project_id: str = typer.Argument(..., help="Project record id."),
    top_n: Optional[int] = typer.Option(None, "--top-n", min=1, help="Candidates to score."),
    details: bool = typer.Option(False, "--details", help="Show the deficit breakdown of every candidate."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Also write candidates as JSON."),
) -> None:
    """Score employees against a project's skill requirements."""

    settings = AppSettings()
    notifier = ConsoleNotifier(_console)

    async def _run() -> ProjectReadinessView:
        async with HttpBackend(settings) as backend:
            view = ProjectReadinessView(backend, notifier, settings, project_id=project_id)
            await view.evaluate(top_n)
            view.close()
            return view

    view = asyncio.run(_run())
    if details:
        for candidate in view.candidates:
            view.toggle_details(candidate.employee_id)

    _render_readiness(view)
    if json_out and view.has_results:
        path = export_candidates_json(project_id=project_id, candidates=view.candidates, output_path=json_out)
        _console.print(f"[green]JSON written to:[/green] {path}")
    if view.error or notifier.had_error:
        raise typer.Exit(code=1)


@readiness_app.command("assign")
def readiness_assign(
    project_id: str = typer.Argument(..., help="Project record id."),
    employee_id: str = typer.Argument(..., help="Employee to assign."),
) -> None:
    """Create a project assignment for an employee."""

    settings = AppSettings()

    async def _run() -> MutationOutcome:
        async with HttpBackend(settings) as backend:
            view = ProjectReadinessView(backend, ConsoleNotifier(_console), settings, project_id=project_id)
            outcome = await view.assign(employee_id)
            view.close()
            return outcome

    _exit_on_failure(asyncio.run(_run()))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
