"""Tests for ordered teardown of REAPER and the display server."""

from __future__ import annotations

import pytest

from reaper_cli.runner.errors import PollIoError
from reaper_cli.runner.models import LifecycleState
from reaper_cli.runner.termination import kill_and_exit, owned, release


def test_kill_and_exit_orders_target_before_display_server(events, make_process) -> None:
    outcome = kill_and_exit(make_process("reaper"), make_process("xvfb"), 1, LifecycleState.TIMED_OUT)

    assert events == [("kill", "reaper"), ("wait", "reaper"), ("kill", "xvfb"), ("wait", "xvfb")]
    assert outcome.forced is True
    assert outcome.code == 1


def test_kill_and_exit_without_display_server(events, make_process) -> None:
    outcome = kill_and_exit(make_process("reaper"), None, 0, LifecycleState.WINDOW_FOUND)

    assert events == [("kill", "reaper"), ("wait", "reaper")]
    assert outcome.reason is LifecycleState.WINDOW_FOUND


def test_wait_failure_propagates_and_skips_display_server(events, make_process) -> None:
    target = make_process("reaper")
    target.fail_on.add("wait")

    with pytest.raises(PollIoError):
        kill_and_exit(target, make_process("xvfb"), 0, LifecycleState.TIMED_OUT)

    assert ("kill", "xvfb") not in events


def test_release_skips_exited_process(clock, events, make_process) -> None:
    process = make_process("reaper", exit_at=0.0)
    release(process)
    assert events == []


def test_owned_scopes_unwind_inner_first(events, make_process) -> None:
    with pytest.raises(KeyboardInterrupt):
        with owned(make_process("xvfb")):
            with owned(make_process("reaper")):
                raise KeyboardInterrupt

    assert [name for op, name in events if op == "kill"] == ["reaper", "xvfb"]


def test_release_kills_when_poll_fails(events, make_process) -> None:
    process = make_process("reaper")
    process.fail_on.add("poll")

    release(process)

    assert process.killed is True
    assert events == [("kill", "reaper"), ("wait", "reaper")]


def test_owned_scopes_kill_target_whose_poll_fails(events, make_process) -> None:
    target = make_process("reaper")
    target.fail_on.add("poll")

    with pytest.raises(PollIoError):
        with owned(make_process("xvfb")):
            with owned(target):
                target.poll()

    assert events == [("kill", "reaper"), ("wait", "reaper"), ("kill", "xvfb"), ("wait", "xvfb")]
