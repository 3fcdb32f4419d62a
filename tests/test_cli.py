"""Tests for CLI commands via Typer CliRunner."""

import json
from unittest.mock import MagicMock, patch

import tomli_w
from typer.testing import CliRunner

from jobstream.cli import run_cmd
from jobstream.cli.main import app
from jobstream.core.events import FailureSummary, ProgressEvent, SuccessSummary, encode
from jobstream.core.session import StreamSession
from jobstream.jobs.sample import SampleImportJob
from jobstream.web.runner import STATUS_COMPLETED, JobRunner

runner = CliRunner()


def _write_config(path, **sample):
    settings = {"total": 3, "delay_seconds": 0}
    settings.update(sample)
    with open(path, "wb") as f:
        tomli_w.dump({"jobs": {"sample": settings}}, f)
    return path


def _mock_stream(chunks, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.iter_text.return_value = iter(chunks)
    response.read.return_value = b"not found"
    ctx = MagicMock()
    ctx.__enter__.return_value = response
    ctx.__exit__.return_value = False
    return ctx


class TestJobsCommand:
    def test_lists_sample(self):
        result = runner.invoke(app, ["jobs"])
        assert result.exit_code == 0
        assert "sample" in result.output


class TestRunCommand:
    def test_stream_mode_prints_frames(self, tmp_path):
        config = _write_config(tmp_path / "c.toml")
        result = runner.invoke(app, ["run", "sample", "--config", str(config)])
        assert result.exit_code == 0
        frames = [line for line in result.output.splitlines() if line.startswith("data: ")]
        assert len(frames) == 7  # 2 info + 3 progress + 1 success + terminal
        assert json.loads(frames[-1][len("data: "):])["done"] is True

    def test_batch_mode_prints_json(self, tmp_path):
        config = _write_config(tmp_path / "c.toml")
        result = runner.invoke(app, ["run", "sample", "--batch", "--config", str(config)])
        assert result.exit_code == 0
        assert '"imported": 3' in result.output
        assert '"done"' not in result.output

    def test_fatal_failure_exits_1(self, tmp_path):
        config = _write_config(tmp_path / "c.toml", fail_fatal_at=2)
        result = runner.invoke(app, ["run", "sample", "--config", str(config)])
        assert result.exit_code == 1
        assert '"success":false' in result.output

    def test_batch_failure_exits_1(self, tmp_path):
        config = _write_config(tmp_path / "c.toml", fail_fatal_at=1)
        result = runner.invoke(app, ["run", "sample", "--batch", "--config", str(config)])
        assert result.exit_code == 1

    def test_unknown_job(self):
        result = runner.invoke(app, ["run", "nope"])
        assert result.exit_code == 1
        assert "Unknown job" in result.output


class TestConsoleSink:
    def test_closed_stdout_counts_as_disconnect(self):
        """A broken stdout pipe closes the stream instead of failing the job."""
        config = {"total": 3, "delay_seconds": 0}
        session = StreamSession(run_cmd.ConsoleSink())
        with patch.object(run_cmd.console, "out", side_effect=BrokenPipeError(32, "Broken pipe")):
            job_runner = JobRunner(SampleImportJob(config), session)
            job_runner.run()

        assert not session.is_open
        assert session.frames_written == 0
        assert job_runner.status == STATUS_COMPLETED


class TestTailCommand:
    def test_prints_records(self):
        wire = (
            encode(ProgressEvent("info", "Starting..."))
            + encode(SuccessSummary(1, 0, 1, 20))
        ).decode()
        with patch("jobstream.cli.tail_cmd.httpx.stream", return_value=_mock_stream([wire])) as stream:
            result = runner.invoke(app, ["tail", "http://localhost:8000/jobs/sample/run"])

        assert result.exit_code == 0
        assert stream.call_args.kwargs["params"] == {"stream": "true"}
        lines = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
        assert lines[0]["message"] == "Starting..."
        assert lines[-1]["done"] is True

    def test_failure_record_exits_1(self):
        wire = encode(FailureSummary("database unreachable", 150)).decode()
        with patch("jobstream.cli.tail_cmd.httpx.stream", return_value=_mock_stream([wire])):
            result = runner.invoke(app, ["tail", "http://x/jobs/sample/run"])
        assert result.exit_code == 1
        assert "database unreachable" in result.output

    def test_missing_terminal_exits_1(self):
        wire = encode(ProgressEvent("info", "cut off")).decode()
        with patch("jobstream.cli.tail_cmd.httpx.stream", return_value=_mock_stream([wire])):
            result = runner.invoke(app, ["tail", "http://x/jobs/sample/run"])
        assert result.exit_code == 1
        assert "without a terminal record" in result.output

    def test_http_error_status(self):
        with patch("jobstream.cli.tail_cmd.httpx.stream", return_value=_mock_stream([], 404)):
            result = runner.invoke(app, ["tail", "http://x/jobs/nope/run"])
        assert result.exit_code == 1
        assert "HTTP 404" in result.output


class TestInitConfigCommand:
    def test_writes_defaults(self, tmp_path):
        target = tmp_path / "conf" / "jobstream.toml"
        result = runner.invoke(app, ["init-config", str(target)])
        assert result.exit_code == 0
        assert target.exists()
        assert "[jobs.sample]" in target.read_text()

    def test_refuses_overwrite(self, tmp_path):
        target = tmp_path / "jobstream.toml"
        target.write_text("# mine\n")
        result = runner.invoke(app, ["init-config", str(target)])
        assert result.exit_code == 1
        assert target.read_text() == "# mine\n"

    def test_force_overwrites(self, tmp_path):
        target = tmp_path / "jobstream.toml"
        target.write_text("# mine\n")
        result = runner.invoke(app, ["init-config", str(target), "--force"])
        assert result.exit_code == 0
        assert "[server]" in target.read_text()
