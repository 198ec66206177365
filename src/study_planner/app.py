"""Interactive CLI application."""
from datetime import date

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table

from study_planner.dashboard import get_goal_stats, get_overview, get_progress_color
from study_planner.db import init_db, DEFAULT_DB_PATH
from study_planner.distributor import SchedulingImpossible, finalize_goal
from study_planner.feasibility import evaluate_goal
from study_planner.goals import (
    create_draft, add_topics, configure_routine, get_goal, get_topics, update_hours,
    list_goals, remove_topic, restore_topic, delete_goal,
)
from study_planner.logging_config import configure_logging
from study_planner.tasks import (
    list_sessions, list_sessions_on, list_overdue, complete_session, uncomplete_session,
    reschedule_session,
)
from study_planner.weekdays import parse_weekdays, format_weekdays

console = Console()

EXIT_WORDS = ("q", "quit", "menu")


class WizardCancelled(Exception):
    """Raised when the user leaves the goal wizard before finishing it."""


def wizard_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise WizardCancelled()
    return answer


def wizard_int_prompt(prompt: str, **kwargs) -> int:
    while True:
        answer = wizard_prompt(prompt, **kwargs)
        try:
            return int(answer)
        except ValueError:
            console.print("[red]Please enter a whole number.[/red]")


def parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        raise ValueError(f"Invalid date '{text}', use YYYY-MM-DD") from None


def format_minutes(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    return f"{hours}h{rest:02d}" if rest else f"{hours}h"


def show_welcome():
    console.print(Panel(
        "[bold]Study Planner[/bold]\n[dim]Goals, routines and dated study sessions[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("new", "Create a goal and its schedule"),
        ("edit", "Change a goal's topics, hours or routine"),
        ("goals", "List goals"),
        ("show", "Goal details and schedule"),
        ("today", "Today's sessions"),
        ("overdue", "Overdue sessions"),
        ("done", "Mark a session complete"),
        ("undo", "Unmark a completed session"),
        ("move", "Move a session to another date"),
        ("reschedule", "Rebuild a goal's schedule"),
        ("delete", "Delete a goal"),
        ("dashboard", "Progress overview"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def session_table(sessions: list, today: date, title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Date")
    table.add_column("Session")
    table.add_column("Duration", justify="right")
    table.add_column("Status")
    for s in sessions:
        if s.completed:
            status = "[green]Done[/green]"
        elif s.is_overdue(today):
            status = "[dark_orange]Overdue[/dark_orange]"
        else:
            status = "[cyan]Pending[/cyan]"
        table.add_row(str(s.id), s.scheduled_date.isoformat(), s.title, format_minutes(s.duration_minutes), status)
    return table


def show_feasibility(report, topics: list) -> None:
    names = {t.id: t.name for t in topics}
    color = "green" if report.feasible else "red"
    console.print(Panel(
        f"Required: [bold]{report.required_hours}h[/bold]  |  "
        f"Available: [bold]{report.available_hours}h[/bold] over {report.available_days} study days",
        title=f"[{color}]{'Feasible' if report.feasible else 'Not enough time'}[/{color}]",
        border_style=color,
    ))
    if not report.feasible:
        console.print(f"[red]{report.hours_short}h short.[/red] Suggested topics to drop:")
        for topic_id in report.suggested_removals:
            console.print(f"  [yellow]-[/yellow] {names.get(topic_id, topic_id)}")


def ask_topics() -> list[dict]:
    console.print("[dim]Enter topics one by one, leave the name blank to finish.[/dim]")
    topics = []
    while True:
        name = wizard_prompt("Topic name", default="").strip()
        if not name:
            if topics:
                return topics
            console.print("[red]Add at least one topic.[/red]")
            continue
        hours = wizard_int_prompt("Estimated hours")
        if hours <= 0:
            console.print("[red]Hours must be positive.[/red]")
            continue
        topics.append({"name": name, "hours": hours})


def ask_routine(goal=None) -> tuple[int, set]:
    hours_kwargs = {"default": str(goal.daily_hours)} if goal and goal.daily_hours else {}
    days_kwargs = {"default": format_weekdays(goal.weekdays)} if goal and goal.weekdays else {}
    daily_hours = wizard_int_prompt("Study hours per day", **hours_kwargs)
    days = wizard_prompt("Study days (e.g. SEG,QUA,SEX or MON,WED,FRI)", **days_kwargs)
    return daily_hours, parse_weekdays(days)


def show_result(result) -> None:
    console.print(f"[green]{result.placed} sessions scheduled.[/green]")
    if result.unplaced:
        console.print(f"[yellow]{result.unplaced} sessions did not fit before the deadline.[/yellow]")


def check_and_schedule(db_path: str, goal_id: int, today: date) -> None:
    """Show the feasibility check and schedule the goal, or leave it as a draft."""
    report = evaluate_goal(db_path, goal_id, today)
    show_feasibility(report, get_topics(db_path, goal_id))
    force = False
    if not report.feasible:
        if Confirm.ask("Drop the suggested topics?", default=False):
            for topic_id in report.suggested_removals:
                remove_topic(db_path, topic_id)
        elif Confirm.ask("Schedule what fits anyway?", default=False):
            force = True
        else:
            console.print(
                f"[yellow]Goal {goal_id} kept as a draft. Use 'edit' to change hours, topics or routine.[/yellow]"
            )
            return
    show_result(finalize_goal(db_path, goal_id, today, force=force))


def cmd_new(db_path: str, today: date):
    console.print(Panel("[dim]Type 'q' at any prompt to leave the wizard.[/dim]", title="New Goal"))

    console.print("\n[bold]1. Subject and deadline[/bold]")
    title = wizard_prompt("Main subject")
    deadline = parse_date(wizard_prompt("Deadline (YYYY-MM-DD)"))
    goal = create_draft(db_path, title, deadline, today)

    console.print("\n[bold]2. Topics[/bold]")
    add_topics(db_path, goal.id, ask_topics())

    console.print("\n[bold]3. Routine[/bold]")
    daily_hours, weekdays = ask_routine()
    configure_routine(db_path, goal.id, daily_hours, weekdays)

    console.print("\n[bold]4. Check and schedule[/bold]")
    check_and_schedule(db_path, goal.id, today)


def cmd_edit(db_path: str, today: date):
    goal = get_goal(db_path, int(Prompt.ask("Goal ID")))
    console.print(Panel("[dim]Type 'q' at any prompt to leave without saving.[/dim]", title=f"Edit: {goal.title}"))

    console.print("\n[bold]1. Topics[/bold]")
    topics = get_topics(db_path, goal.id)
    kept, hours = [], []
    for t in topics:
        if Confirm.ask(f"Keep '{t.name}'?", default=t.is_active):
            kept.append(t)
            hours.append(wizard_int_prompt(f"Estimated hours for '{t.name}'", default=str(t.estimated_hours)))

    console.print("\n[bold]2. Routine[/bold]")
    daily_hours, weekdays = ask_routine(goal)

    kept_ids = {t.id for t in kept}
    if kept:
        update_hours(db_path, goal.id, [t.id for t in kept], hours)
    for t in topics:
        if t.id in kept_ids and not t.is_active:
            restore_topic(db_path, t.id)
        elif t.id not in kept_ids and t.is_active:
            remove_topic(db_path, t.id)
    configure_routine(db_path, goal.id, daily_hours, weekdays)

    console.print("\n[bold]3. Check and schedule[/bold]")
    check_and_schedule(db_path, goal.id, today)


def cmd_goals(db_path: str, today: date):
    goals = list_goals(db_path)
    if not goals:
        console.print("[yellow]No goals yet. Use 'new' to create one.[/yellow]")
        return
    table = Table(title="Goals")
    table.add_column("ID", justify="right")
    table.add_column("Subject", style="cyan")
    table.add_column("Deadline")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    for g in goals:
        stats = get_goal_stats(db_path, g.id, today)
        color = get_progress_color(stats["progress"])
        table.add_row(
            str(g.id), g.title, g.deadline.isoformat(), g.status,
            f"[{color}]{stats['progress']}%[/{color}]",
        )
    console.print(table)


def cmd_show(db_path: str, today: date):
    goal = get_goal(db_path, int(Prompt.ask("Goal ID")))
    topics = get_topics(db_path, goal.id)
    stats = get_goal_stats(db_path, goal.id, today)
    console.print(Panel(
        f"Deadline: [bold]{goal.deadline.isoformat()}[/bold]  |  "
        f"Routine: {goal.daily_hours or '-'}h/day on {format_weekdays(goal.weekdays) or 'no days'}\n"
        f"Progress: [bold]{stats['progress']}%[/bold] ({stats['completed_sessions']}/{stats['total_sessions']} sessions, "
        f"{stats['overdue_sessions']} overdue)",
        title=goal.title, border_style="blue",
    ))
    table = Table(title="Topics")
    table.add_column("#", justify="right")
    table.add_column("Topic")
    table.add_column("Hours", justify="right")
    table.add_column("Source")
    for t in topics:
        name = t.name if t.is_active else f"[strike dim]{t.name}[/strike dim]"
        table.add_row(str(t.position), name, str(t.estimated_hours), t.source)
    console.print(table)
    console.print(session_table(list_sessions(db_path, goal.id), today, "Schedule"))


def cmd_today(db_path: str, today: date):
    sessions = list_sessions_on(db_path, today)
    if not sessions:
        console.print("[green]Nothing scheduled for today.[/green]")
        return
    console.print(session_table(sessions, today, f"Today ({today.isoformat()})"))


def cmd_overdue(db_path: str, today: date):
    sessions = list_overdue(db_path, today)
    if not sessions:
        console.print("[green]No overdue sessions.[/green]")
        return
    console.print(session_table(sessions, today, "Overdue"))


def cmd_done(db_path: str, today: date):
    complete_session(db_path, int(Prompt.ask("Session ID")))
    console.print("[green]Session completed![/green]")


def cmd_undo(db_path: str, today: date):
    uncomplete_session(db_path, int(Prompt.ask("Session ID")))
    console.print("[green]Session marked as pending.[/green]")


def cmd_move(db_path: str, today: date):
    session_id = int(Prompt.ask("Session ID"))
    new_date = parse_date(Prompt.ask("New date (YYYY-MM-DD)"))
    reschedule_session(db_path, session_id, new_date)
    console.print(f"[green]Session moved to {new_date.isoformat()}.[/green]")


def cmd_reschedule(db_path: str, today: date):
    goal_id = int(Prompt.ask("Goal ID"))
    report = evaluate_goal(db_path, goal_id, today)
    if not report.feasible:
        show_feasibility(report, get_topics(db_path, goal_id))
        if not Confirm.ask("Schedule what fits anyway?", default=False):
            return
    show_result(finalize_goal(db_path, goal_id, today, force=not report.feasible))


def cmd_delete(db_path: str, today: date):
    goal = get_goal(db_path, int(Prompt.ask("Goal ID")))
    if Confirm.ask(f"Delete '{goal.title}' and all its sessions?", default=False):
        delete_goal(db_path, goal.id)
        console.print("[green]Goal deleted.[/green]")


def cmd_dashboard(db_path: str, today: date):
    overview = get_overview(db_path, today)
    console.print(Panel(f"[bold]{today.isoformat()}[/bold]", title="Study Dashboard", border_style="blue"))
    for entry in overview["goals"]:
        pct = entry["progress"]
        color = get_progress_color(pct)
        bar_filled = int(pct / 5)
        bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
        console.print(
            f"  {entry['goal'].title:<30} {bar} [bold]{pct}%[/bold] [{color}]{entry['label']}[/{color}]"
            f"  ({format_minutes(entry['completed_minutes'])} of {format_minutes(entry['planned_minutes'])})"
        )
    console.print(
        f"\n  Today: [bold]{len(overview['today'])}[/bold] sessions  |  "
        f"Overdue: [bold]{len(overview['overdue'])}[/bold]"
    )
    if overview["overdue"]:
        console.print("\n  [yellow]Recommendation: catch up on overdue sessions or run 'reschedule'.[/yellow]")


COMMANDS = {
    "new": cmd_new,
    "edit": cmd_edit,
    "goals": cmd_goals,
    "show": cmd_show,
    "today": cmd_today,
    "overdue": cmd_overdue,
    "done": cmd_done,
    "undo": cmd_undo,
    "move": cmd_move,
    "reschedule": cmd_reschedule,
    "delete": cmd_delete,
    "dashboard": cmd_dashboard,
}


def run_command(db_path: str, choice: str, today: date) -> None:
    handler = COMMANDS.get(choice)
    if handler is None:
        console.print("[red]Unknown command. Try again.[/red]")
        return
    try:
        handler(db_path, today)
    except WizardCancelled:
        console.print("[dim]Back to menu.[/dim]")
    except SchedulingImpossible as e:
        console.print(f"[red]{e}[/red]")
    except (ValueError, LookupError) as e:
        console.print(f"[red]Error: {e}[/red]")


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Good luck with your studies![/dim]")
            break
        try:
            run_command(db_path, choice, date.today())
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")


if __name__ == "__main__":
    main()
