"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_store import JsonAppointmentStore
from ..config import AppConfig
from ..domain.exceptions import ScheduleError
from ..domain.filters import AppointmentFilter
from ..domain.intervals import Duration
from ..domain.models import Appointment, WeekView
from ..domain.mutations import FlagChange, RequiresConfirmation
from ..domain.status import AppointmentStatus
from ..domain.timegrid import parse_date
from ..services.scheduler import ScheduleService

app = typer.Typer(
    name="tutorschedule",
    help="Weekly lesson calendar for a tutor",
    add_completion=False,
)

console = Console()

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    AppointmentStatus.NOT_CONFIRMED: "yellow",
    AppointmentStatus.CONFIRMED: "blue",
    AppointmentStatus.COMPLETED: "green",
    AppointmentStatus.PAID: "magenta",
}


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _service(ctx: typer.Context) -> ScheduleService:
    return ctx.obj["service"]


def _fail(message: str) -> None:
    console.print(f"[bold red]Ошибка:[/bold red] {message}")
    raise typer.Exit(1)


def _ask(request: RequiresConfirmation, assume_yes: bool) -> bool:
    """Ask the tutor to approve a pending change."""
    if assume_yes:
        return True
    return typer.confirm(request.reason, default=False)


def _describe(appointment: Appointment) -> str:
    status = appointment.status
    return (
        f"[{STATUS_STYLES[status]}]{appointment.start_time}-{appointment.end_time} "
        f"{appointment.student} · {appointment.subject} ({status.label})[/{STATUS_STYLES[status]}]"
    )


def _render_week(week: WeekView, locale: str) -> Table:
    table = Table(
        title=f"Расписание {week.start.format('DD.MM.YYYY')} – {week.end.format('DD.MM.YYYY')}",
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )
    table.add_column("Время", style="dim", no_wrap=True, min_width=5)

    for day in week.days:
        header = day.date.format("dd D MMM", locale=locale)
        if day.is_day_off:
            header += "\n[red]выходной[/red]"
        table.add_column(header, style="bold" if day.is_weekend else None)

    for row, time_label in enumerate(slot.time for slot in week.days[0].slots):
        cells = [time_label]
        for day in week.days:
            slot = day.slots[row]
            if slot.is_start:
                status = slot.appointment.status
                style = STATUS_STYLES[status]
                cells.append(
                    f"[{style}]{slot.appointment.student}\n{slot.appointment.subject}\n"
                    f"{status.label}[/{style}]"
                )
            elif slot.is_continuation:
                cells.append("[dim]│[/dim]")
            elif not slot.is_selectable:
                cells.append("[dim]—[/dim]")
            else:
                cells.append("")
        table.add_row(*cells)

    return table


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Manage the tutor's weekly lesson calendar.
    """
    try:
        config = AppConfig.load(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Ошибка:[/bold red] {e}")
        raise typer.Exit(1)

    _configure_logging("DEBUG" if verbose else config.log_level)
    logger.debug("Using data file %s", config.data_file)

    pendulum.set_locale(config.locale)
    store = JsonAppointmentStore(config.data_file)
    ctx.obj = {
        "config": config,
        "service": ScheduleService(store=store, window=config.grid.to_day_window()),
    }


@app.command()
def week(
    ctx: typer.Context,
    day: Annotated[Optional[str], typer.Argument(help="Any day of the week (YYYY-MM-DD). Defaults to today.")] = None,
    student: Annotated[Optional[str], typer.Option("--student", help="Show only this student.")] = None,
    subject: Annotated[Optional[str], typer.Option("--subject", help="Show only this subject.")] = None,
    status: Annotated[Optional[List[AppointmentStatus]], typer.Option("--status", help="Show only these statuses (repeatable).")] = None,
):
    """
    Show the week grid.

    Examples:

        tutorschedule week
        tutorschedule week 2024-06-05 --student Анна --status confirmed
    """
    config: AppConfig = ctx.obj["config"]
    service = _service(ctx)

    try:
        anchor = parse_date(day) if day else pendulum.today(config.timezone).date()
        appointment_filter = AppointmentFilter(
            student=student,
            subject=subject,
            statuses=frozenset(status) if status else frozenset(AppointmentStatus),
        )
        view = service.week_view(anchor, appointment_filter)
    except ScheduleError as e:
        _fail(str(e))

    console.print()
    console.print(_render_week(view, config.locale))
    console.print()


@app.command()
def add(
    ctx: typer.Context,
    day: Annotated[str, typer.Argument(help="Lesson date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    duration: Annotated[int, typer.Option("--duration", "-d", help="Lesson length in minutes: 60, 90 or 120")] = 60,
    student: Annotated[str, typer.Option("--student", "-s", help="Student name")] = "",
    subject: Annotated[str, typer.Option("--subject", help="Subject")] = "",
    price: Annotated[float, typer.Option("--price", help="Lesson price")] = 0,
    comment: Annotated[str, typer.Option("--comment", help="Free-text comment")] = "",
    confirmed: Annotated[bool, typer.Option("--confirmed", help="Mark as confirmed right away")] = False,
):
    """
    Book a new lesson.
    """
    service = _service(ctx)

    try:
        appointment = Appointment.book(
            parse_date(day),
            start,
            Duration.parse(duration),
            student=student,
            subject=subject,
            price=price,
            comment=comment,
            is_confirmed=confirmed,
        )
        result = service.save_appointment(appointment)
    except ScheduleError as e:
        _fail(str(e))

    _report_save(result)


@app.command()
def move(
    ctx: typer.Context,
    appointment_id: Annotated[str, typer.Argument(help="Lesson id")],
    day: Annotated[Optional[str], typer.Option("--date", help="New date (YYYY-MM-DD)")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="New start time (HH:MM)")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="New length in minutes")] = None,
):
    """
    Move a lesson to another day or time, or change its length.
    """
    service = _service(ctx)

    try:
        current = service.get_appointment(appointment_id)
        updated = current.rescheduled(
            day=parse_date(day) if day else None,
            start_time=start,
            duration=duration,
        )
        result = service.save_appointment(updated, editing_id=current.id)
    except ScheduleError as e:
        _fail(str(e))

    _report_save(result)


def _report_save(result) -> None:
    if result.saved:
        console.print(f"[green]✓ {result.message}[/green] {_describe(result.appointment)}")
        console.print(f"  id: [dim]{result.appointment.id}[/dim]")
        return

    console.print(f"[bold red]✗ {result.message}[/bold red]")
    for other in result.conflicts:
        console.print(f"  {_describe(other)}")
    raise typer.Exit(1)


@app.command()
def status(
    ctx: typer.Context,
    appointment_id: Annotated[str, typer.Argument(help="Lesson id")],
    change: Annotated[FlagChange, typer.Argument(help="Status change to apply")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
):
    """
    Tick or untick a lesson's confirmed / completed / paid box.
    """
    service = _service(ctx)

    try:
        proposal = service.change_flag(appointment_id, change)
        if isinstance(proposal, RequiresConfirmation):
            if not _ask(proposal, yes):
                console.print("[yellow]Отменено.[/yellow]")
                return
            appointment = service.commit_flag_change(proposal)
        else:
            appointment = proposal.value
    except ScheduleError as e:
        _fail(str(e))

    console.print(f"[green]✓[/green] {_describe(appointment)}")


@app.command()
def delete(
    ctx: typer.Context,
    appointment_id: Annotated[str, typer.Argument(help="Lesson id")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
):
    """
    Delete a lesson.
    """
    service = _service(ctx)

    try:
        request = service.propose_delete(appointment_id)
        if not _ask(request, yes):
            console.print("[yellow]Отменено.[/yellow]")
            return
        service.commit_delete(request)
    except ScheduleError as e:
        _fail(str(e))

    console.print("[green]✓ Запись удалена.[/green]")


@app.command("day-off")
def day_off(
    ctx: typer.Context,
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    reopen: Annotated[bool, typer.Option("--reopen", help="Make the day bookable again.")] = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
):
    """
    Mark a day as a day off, or reopen it with --reopen.
    """
    service = _service(ctx)

    try:
        proposal = service.propose_day_off(parse_date(day), is_day_off=not reopen)
        if isinstance(proposal, RequiresConfirmation):
            if not _ask(proposal, yes):
                console.print("[yellow]Отменено.[/yellow]")
                return
            service.commit_day_off(proposal)
    except ScheduleError as e:
        _fail(str(e))

    state = "рабочий" if reopen else "выходной"
    console.print(f"[green]✓ {day}: {state}[/green]")


@app.command()
def export(
    ctx: typer.Context,
    start: Annotated[str, typer.Argument(help="First day (YYYY-MM-DD)")],
    end: Annotated[str, typer.Argument(help="Last day (YYYY-MM-DD)")],
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="CSV file to write")] = None,
):
    """
    Export lessons of a date range to CSV.
    """
    service = _service(ctx)

    try:
        start_date = parse_date(start)
        end_date = parse_date(end)
        if end_date < start_date:
            _fail("Дата окончания раньше даты начала.")
        path = service.export(start_date, end_date, output)
    except (ScheduleError, OSError) as e:
        _fail(str(e))

    console.print(f"[green]✓ Отчёт сохранён:[/green] {path}")


@app.command()
def students(ctx: typer.Context):
    """
    List known students and subjects.
    """
    service = _service(ctx)

    try:
        names = service.students()
        subjects = service.subjects()
    except ScheduleError as e:
        _fail(str(e))

    if not names and not subjects:
        console.print("[yellow]Записей пока нет.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Ученики", style="bold yellow")
    table.add_column("Предметы", style="dim")

    for row in range(max(len(names), len(subjects))):
        table.add_row(
            names[row] if row < len(names) else "",
            subjects[row] if row < len(subjects) else "",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]tutorschedule[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
