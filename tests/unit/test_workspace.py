from __future__ import annotations

from ci_patch.models import PatchRequest, ToolPaths
from ci_patch.tools.workspace import WorkspacePreparer


def _request(**kwargs) -> PatchRequest:
    values = {"diff_id": "D1", "base_commit": "origin/main", "tools": ToolPaths(git="g")}
    values.update(kwargs)
    return PatchRequest(**values)


def test_prepare_runs_reset_clean_submodules_in_order(runner, task_logger) -> None:
    preparer = WorkspacePreparer(runner=runner, logger=task_logger, tag="arc-patch")

    assert preparer.prepare(_request(scm_type="git")) is True
    assert runner.calls == [
        ["g", "reset", "--hard", "origin/main"],
        ["g", "clean", "-fd", "-f"],
        ["g", "submodule", "update", "--init", "--recursive"],
    ]


def test_prepare_skips_centralized_workspaces(runner, task_logger) -> None:
    preparer = WorkspacePreparer(runner=runner, logger=task_logger, tag="arc-patch")

    assert preparer.prepare(_request(scm_type="svn")) is False
    assert runner.calls == []


def test_prepare_warns_on_reset_failure_and_continues(runner, task_logger, log_stream) -> None:
    runner.results["reset"] = 128
    preparer = WorkspacePreparer(runner=runner, logger=task_logger, tag="arc-patch")

    preparer.prepare(_request())

    assert runner.verbs() == ["reset", "clean", "submodule"]
    assert "[arc-patch] WARNING: Got non-zero exit code resetting to base commit origin/main: 128" in log_stream.getvalue()


def test_prepare_streams_output_to_build_log(runner, task_logger, log_stream) -> None:
    WorkspacePreparer(runner=runner, logger=task_logger, tag="t").prepare(_request(skip_forced_clean=True))

    assert log_stream.getvalue().splitlines() == ["ran reset", "ran submodule"]
