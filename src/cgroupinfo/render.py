"""Text and HTML presentation of cgroup reports."""

from dataclasses import dataclass, field

import jinja2

from cgroupinfo.models import (
    NA_NO_LIMIT,
    CpuSection,
    FailedReport,
    HostInfo,
    MemorySection,
    Report,
    UnknownReport,
    V1Report,
    V2Report,
    bytes_to_mib,
    format_percent,
)

_JINJA_ENV = jinja2.Environment(
    loader=jinja2.PackageLoader("cgroupinfo", "templates"),
    autoescape=jinja2.select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass(slots=True)
class Section:
    """One titled group of report lines."""

    title: str
    rows: list[tuple[str, str]] = field(default_factory=list)
    blocks: list[tuple[str, str]] = field(default_factory=list)  # multi-line bodies
    error: str | None = None


def report_error(report: Report) -> str | None:
    if isinstance(report, (UnknownReport, FailedReport)):
        return report.error
    return None


def _cores_limit(cpu: CpuSection) -> str:
    cores = cpu.limit.limit_cores if cpu.limit else None
    if cores is None:
        return "N/A"
    return f"{cores:.2f}"


def _host_memory_share(memory: MemorySection, host: HostInfo) -> str:
    if memory.limit_bytes is None:
        return NA_NO_LIMIT
    return format_percent(memory.limit_bytes / host.memory_total * 100)


def _cpu_section(title: str, priority_label: str, cpu: CpuSection, host: HostInfo | None) -> Section:
    section = Section(title=title, error=cpu.error)

    if cpu.limit is not None:
        section.rows += [
            ("CPU Max", cpu.limit.cpu_max),
            ("CPU Period", cpu.limit.cpu_period),
            ("Burstable CPU", cpu.limit.burstable_percent),
            ("Equivalent CPU Cores Limit", _cores_limit(cpu)),
        ]
    if host is not None and host.cpu_count:
        section.rows.append(("Host CPUs", str(host.cpu_count)))
    if cpu.priority is not None:
        section.rows.append((priority_label, cpu.priority))

    usage = cpu.usage
    if usage is not None:
        if usage.initial is not None:
            section.rows.append((f"Initial CPU Usage (cumulative {usage.unit})", str(usage.initial)))
        section.rows.append(("Sampling Interval", f"{usage.interval:g} seconds"))
        if usage.error is not None:
            section.rows.append(("CPU Usage", usage.error))
        elif usage.usage_cores is not None:
            section.rows += [
                ("Current CPU Usage (cores)", f"{usage.usage_cores:.4f}"),
                ("CPU Utilization of Limit", usage.utilization),
            ]

    if cpu.stat is not None:
        section.blocks.append(("CPU Stat", cpu.stat))
    return section


def _memory_section(title: str, memory: MemorySection, host: HostInfo | None) -> Section:
    section = Section(title=title, error=memory.error)
    if memory.error is not None:
        return section

    section.rows += [
        ("Memory Limit", memory.limit),
        ("Memory Usage", memory.usage),
        ("Memory Utilization of Limit", memory.utilization),
    ]
    if host is not None and host.memory_total:
        section.rows.append(("Host Memory", f"{host.memory_total} bytes ({bytes_to_mib(host.memory_total):.2f} MiB)"))
        section.rows.append(("Limit Share of Host Memory", _host_memory_share(memory, host)))
    if memory.stat is not None:
        section.blocks.append(("Memory Stat", memory.stat))
    return section


def report_sections(report: Report) -> list[Section]:
    """
    Lay a report out as sections in display order.

    Error reports have no sections; render :func:`report_error` instead.
    """
    if isinstance(report, V1Report):
        return [
            _cpu_section("CPU (cgroup v1)", "CPU Shares", report.cpu, report.host),
            _memory_section("Memory (cgroup v1)", report.memory, report.host),
        ]
    if isinstance(report, V2Report):
        return [
            _cpu_section("CPU (cgroup v2)", "CPU Weight", report.cpu, report.host),
            _memory_section("Memory (cgroup v2)", report.memory, report.host),
        ]
    return []


def report_rows(report: Report) -> list[tuple[str, str]]:
    """Flatten a report into (label, value) pairs, prefixed by section."""
    error = report_error(report)
    rows = [("Cgroup Version", str(report.version))]
    if error is not None:
        return rows + [("Error", error)]

    for section in report_sections(report):
        if section.error is not None:
            rows.append((section.title, section.error))
        rows += [(f"{section.title} {label}", value) for label, value in section.rows]
    return rows


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.splitlines())


def render_text(report: Report) -> str:
    """Render a report as console text."""
    lines = ["--- Cgroup Information ---", f"Detected Cgroup Version: {report.version}"]

    error = report_error(report)
    if error is not None:
        lines.append(error)
        if isinstance(report, FailedReport):
            lines += list(report.hints)
        return "\n".join(lines) + "\n"

    lines += ["", "--- /proc/self/cgroup Content ---"]
    lines += list(report.membership)
    lines += ["", "--- Resource Limits and Usage ---"]

    for section in report_sections(report):
        lines += ["", f"{section.title}:"]
        if section.error is not None:
            lines.append(f"  {section.error}")
        lines += [f"  {label}: {value}" for label, value in section.rows]
        for label, body in section.blocks:
            lines.append(f"  {label}:")
            lines.append(_indent(body, "    "))

    return "\n".join(lines) + "\n"


def render_html(report: Report) -> str:
    """Render a report as a standalone HTML page."""
    template = _JINJA_ENV.get_template("report.html")
    return template.render(
        version=str(report.version),
        error=report_error(report),
        hints=report.hints if isinstance(report, FailedReport) else (),
        membership=getattr(report, "membership", ()),
        sections=report_sections(report),
    )
