"""Tests for the live dashboard."""

import pytest

from cgroupinfo.app import CgroupInfoApp, ReportTable, SummaryPanel, usage_bar
from cgroupinfo.models import UnknownReport


def test_usage_bar_empty():
    """Test a missing percentage renders an all-dim bar."""
    assert "█" not in usage_bar(None, "green")


def test_usage_bar_half():
    """Test 50% fills half of the bar."""
    assert usage_bar(50.0, "green").count("█") == 10


def test_usage_bar_caps_at_full():
    """Test values above 100% are capped."""
    assert usage_bar(250.0, "green").count("█") == 20


@pytest.mark.asyncio
async def test_app_creation(v2_tree):
    """Test CgroupInfoApp can be instantiated."""
    app = CgroupInfoApp(v2_tree.inspector())
    assert app.title == "cgroupinfo"
    assert app._monitor is not None
    assert app._update_queue is not None


@pytest.mark.asyncio
async def test_app_compose(v2_tree):
    """Test CgroupInfoApp composes correctly."""
    app = CgroupInfoApp(v2_tree.inspector())
    async with app.run_test() as pilot:
        assert pilot.app.query_one("#summary") is not None
        assert pilot.app.query_one("#report-table") is not None


@pytest.mark.asyncio
async def test_app_quit_binding(v2_tree):
    """Test that 'q' binding triggers quit."""
    app = CgroupInfoApp(v2_tree.inspector())
    async with app.run_test() as pilot:
        await pilot.press("q")
        assert not app._monitor.is_running


@pytest.mark.asyncio
async def test_show_report(v2_tree):
    """Test a report fills the summary and the table."""
    report = v2_tree.inspector().inspect()
    app = CgroupInfoApp(v2_tree.inspector())
    async with app.run_test() as pilot:
        app.show_report(report)

        summary = pilot.app.query_one("#summary", SummaryPanel)
        table = pilot.app.query_one(ReportTable)
        assert summary.report is report
        assert "Cgroup Version" in table._current_keys
        assert "CPU (cgroup v2) Burstable CPU" in table._current_keys


@pytest.mark.asyncio
async def test_table_drops_stale_rows(v2_tree):
    """Test rows absent from a newer report are removed."""
    app = CgroupInfoApp(v2_tree.inspector())
    async with app.run_test() as pilot:
        table = pilot.app.query_one(ReportTable)

        table.update_report(v2_tree.inspector().inspect())
        table.update_report(UnknownReport())

        assert table._current_keys == {"Cgroup Version", "Error"}


@pytest.mark.asyncio
async def test_app_receives_updates_from_monitor(v2_tree):
    """Test that the app picks up reports from the monitor."""
    app = CgroupInfoApp(v2_tree.inspector(), refresh_rate=0.1)
    async with app.run_test() as pilot:
        await pilot.pause(1.5)

        summary = pilot.app.query_one("#summary", SummaryPanel)
        assert summary.report is not None
