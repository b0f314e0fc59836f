from __future__ import annotations

import textwrap

from typer.testing import CliRunner

import ci_patch.cli as cli
from ci_patch.cli import app


class _RecordingRunner:
    instances: list["_RecordingRunner"] = []

    def __init__(self, cwd=None, *, logger=None) -> None:
        self.cwd = cwd
        self.calls: list[list[str]] = []
        self.exit_code = 0
        _RecordingRunner.instances.append(self)

    def launch(self, command, *, stdout=None) -> int:
        self.calls.append(list(command))
        return self.exit_code if command[1] == "patch" else 0


def _config(tmp_path, body: str):
    config_path = tmp_path / "ci-patch.yaml"
    config_path.write_text(textwrap.dedent(body).strip() + "\n", encoding="utf-8")
    return config_path


def test_init_writes_template_once(tmp_path) -> None:
    config_path = tmp_path / "ci-patch.yaml"
    runner = CliRunner()

    first = runner.invoke(app, ["init", "--config", str(config_path)], catch_exceptions=False)
    second = runner.invoke(app, ["init", "--config", str(config_path)], catch_exceptions=False)

    assert first.exit_code == 0, first.output
    assert config_path.exists()
    assert second.exit_code == 1


def test_apply_reports_success(tmp_path, monkeypatch) -> None:
    _RecordingRunner.instances.clear()
    monkeypatch.delenv("CONDUIT_TOKEN", raising=False)
    monkeypatch.setattr(cli, "SubprocessRunner", _RecordingRunner)
    config_path = _config(
        tmp_path,
        """
        patch:
          revision_type: diffusion
          scm_type: svn
        tools:
          arc: arc
        """,
    )

    result = CliRunner().invoke(
        app,
        ["apply", "--config", str(config_path), "--diff-id", "D9"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "Patch result: SUCCESS" in result.output
    assert _RecordingRunner.instances[0].calls == [["arc", "patch", "--diff", "D9"]]


def test_apply_exits_non_zero_on_failure(tmp_path, monkeypatch) -> None:
    class _FailingRunner(_RecordingRunner):
        def __init__(self, cwd=None, *, logger=None) -> None:
            super().__init__(cwd, logger=logger)
            self.exit_code = 1

    monkeypatch.setattr(cli, "SubprocessRunner", _FailingRunner)
    config_path = _config(tmp_path, "patch:\n  revision_type: diffusion\n  scm_type: svn\n  diff_id: D1\n")

    result = CliRunner().invoke(app, ["apply", "--config", str(config_path)], catch_exceptions=False)

    assert result.exit_code == 1
    assert "Patch result: FAILURE" in result.output


def test_apply_rejects_invalid_config(tmp_path) -> None:
    config_path = _config(tmp_path, "patch:\n  revision_type: diffusion\n")

    result = CliRunner().invoke(app, ["apply", "--config", str(config_path)], catch_exceptions=False)

    assert result.exit_code == 2
    assert "Invalid patch request" in result.output


def test_status_masks_token(tmp_path) -> None:
    config_path = _config(
        tmp_path,
        """
        patch:
          revision_type: diffusion
          diff_id: D5
          conduit_token: very-secret
        """,
    )

    result = CliRunner().invoke(app, ["status", "--config", str(config_path)], catch_exceptions=False)

    assert result.exit_code == 0, result.output
    assert "Diff: D5" in result.output
    assert "very-secret" not in result.output


def test_status_reports_undecodable_raw_diff(tmp_path) -> None:
    (tmp_path / "change.diff").write_bytes(b"+\xff\xfe\n")
    config_path = _config(tmp_path, "patch:\n  revision_type: other\n  raw_diff_path: change.diff\n")

    result = CliRunner().invoke(app, ["status", "--config", str(config_path)], catch_exceptions=False)

    assert result.exit_code == 2
    assert "Unable to read raw diff" in result.output
