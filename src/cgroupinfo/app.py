"""cgroupinfo - live Textual dashboard."""

from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.css.query import NoMatches
from textual.widgets import DataTable, Footer, Static

from cgroupinfo.inspector import CgroupInspector
from cgroupinfo.models import Report, V1Report, V2Report
from cgroupinfo.monitor import ReportMonitor
from cgroupinfo.render import report_error, report_rows

BAR_WIDTH = 20


def usage_bar(percent: float | None, color: str) -> str:
    """Render a percentage as a 20-cell bar, dim when there is nothing to show."""
    if percent is None:
        return "[dim]" + "░" * BAR_WIDTH + "[/dim]"
    filled = min(int(percent / (100 / BAR_WIDTH)), BAR_WIDTH)
    filled = max(filled, 0)
    return f"[{color}]" + "█" * filled + f"[/{color}]" + "[dim]" + "░" * (BAR_WIDTH - filled) + "[/dim]"


class SummaryPanel(Static):
    """Header widget with CPU and memory utilization bars."""

    DEFAULT_CSS = """
    SummaryPanel {
        height: auto;
        min-height: 5;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._report: Report | None = None

    def compose(self) -> ComposeResult:
        yield Horizontal(
            Static(self._get_cpu_info(), id="cpu-info"),
            Static(self._get_mem_info(), id="mem-info"),
        )

    @property
    def report(self) -> Report | None:
        return self._report

    def update_report(self, report: Report) -> None:
        self._report = report
        try:
            self.query_one("#cpu-info", Static).update(self._get_cpu_info())
            self.query_one("#mem-info", Static).update(self._get_mem_info())
        except NoMatches:
            pass  # Widget not mounted yet

    def _get_cpu_info(self) -> str:
        report = self._report
        if report is None:
            return "Sampling CPU usage..."
        error = report_error(report)
        if error is not None:
            return f"{report.version}\n[red]{error}[/red]"

        if not isinstance(report, (V1Report, V2Report)):
            return str(report.version)
        cpu = report.cpu
        usage = cpu.usage
        percent = usage.utilization_percent if usage else None
        limit = cpu.limit.cpu_max if cpu.limit else cpu.error or "N/A"
        cores = f"{usage.usage_cores:.2f}" if usage and usage.usage_cores is not None else "?"
        return (
            f"{report.version}\n"
            f"CPU \\[{usage_bar(percent, 'green')}] {usage.utilization if usage else 'N/A'}\n"
            f"Cores in use: {cores}  Limit: {limit}"
        )

    def _get_mem_info(self) -> str:
        report = self._report
        if report is None or report_error(report) is not None:
            return ""

        if not isinstance(report, (V1Report, V2Report)):
            return ""
        memory = report.memory
        if memory.error is not None:
            return f"[red]{memory.error}[/red]"
        return (
            f"Mem \\[{usage_bar(memory.utilization_percent, 'cyan')}] {memory.utilization}\n"
            f"Usage: {memory.usage}\n"
            f"Limit: {memory.limit}"
        )


class ReportTable(Container):
    """Key/value table of every report field."""

    DEFAULT_CSS = """
    ReportTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._current_keys: set[str] = set()

    def compose(self) -> ComposeResult:
        yield DataTable(id="report-table")

    def on_mount(self) -> None:
        table = self.query_one("#report-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Field", key="field", width=48)
        table.add_column("Value", key="value")

    def update_report(self, report: Report) -> None:
        """
        Show the fields of a new report.

        Rows keep their position across refreshes; only their values change.
        """
        table = self.query_one("#report-table", DataTable)
        rows = report_rows(report)
        new_keys = {label for label, _ in rows}

        for key in self._current_keys - new_keys:
            table.remove_row(key)

        for label, value in rows:
            if label in self._current_keys:
                table.update_cell(label, "value", value)
            else:
                table.add_row(label, value, key=label)

        self._current_keys = new_keys


class CgroupInfoApp(App):
    """Live view of the container's cgroup limits and usage."""

    TITLE = "cgroupinfo"
    SUB_TITLE = "Container Resource Limits"

    CSS = """
    Screen {
        layout: vertical;
    }

    #summary {
        dock: top;
        height: auto;
        min-height: 6;
    }

    Horizontal {
        height: auto;
    }

    #cpu-info {
        width: 1fr;
        padding-right: 2;
    }

    #mem-info {
        width: 1fr;
        padding-left: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
    ]

    def __init__(self, inspector: CgroupInspector | None = None, refresh_rate: float = 1.0) -> None:
        super().__init__()
        self._update_queue: Queue[Report] = Queue()
        self._monitor = ReportMonitor(self._update_queue, inspector, poll_rate=refresh_rate)

    def compose(self) -> ComposeResult:
        yield SummaryPanel(id="summary")
        yield ReportTable()
        yield Footer()

    def on_mount(self) -> None:
        self._monitor.start()
        self.set_interval(0.5, self._check_for_updates)

    def _check_for_updates(self) -> None:
        """Drain the queue and show the most recent report."""
        report = None
        while True:
            try:
                report = self._update_queue.get_nowait()
            except Empty:
                break

        if report is not None:
            self.show_report(report)

    def show_report(self, report: Report) -> None:
        self.query_one("#summary", SummaryPanel).update_report(report)
        self.query_one(ReportTable).update_report(report)

    def action_refresh(self) -> None:
        self._monitor.refresh()
        self.notify("Refreshing...")

    def action_quit(self) -> None:
        self._monitor.stop(timeout=0.5)
        self.exit()
