"""
Tests for the process runner.

These spawn real child processes through the current interpreter:
- exit status classification and allow_failures
- timeout always fatal
- per-stream chunk ordering and concatenation
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import pytest

from gush.harness.errors import CommandExecutionError, CommandTimeoutError
from gush.harness.process import (
    EXIT_NOT_FOUND,
    ProcessInvocation,
    ProcessOutcome,
    ProcessRunner,
    Stream,
)


def python(code: str, cwd: Path, **kwargs) -> ProcessInvocation:
    return ProcessInvocation(argv=(sys.executable, "-c", code), cwd=cwd, **kwargs)


@pytest.fixture
def process_runner() -> ProcessRunner:
    return ProcessRunner()


# -----------------------------------------------------------------------------
# Invocation / outcome
# -----------------------------------------------------------------------------


class TestProcessInvocation:
    def test_rejects_non_positive_timeout(self, tmp_path: Path):
        with pytest.raises(ValueError, match="timeout"):
            ProcessInvocation(argv=("true",), cwd=tmp_path, timeout=0)

    def test_rejects_empty_argv(self, tmp_path: Path):
        with pytest.raises(ValueError, match="argv"):
            ProcessInvocation(argv=(), cwd=tmp_path)

    def test_defaults(self):
        invocation = ProcessInvocation(argv=["git", "status"])
        assert invocation.argv == ("git", "status")
        assert invocation.timeout == 3600
        assert invocation.allow_failures is False
        assert invocation.cwd == Path.cwd()


class TestProcessOutcome:
    def test_success_follows_exit_status_only(self):
        assert ProcessOutcome(stdout="", stderr="error: boom", exit_status=0).success
        assert not ProcessOutcome(stdout="all good", stderr="", exit_status=1).success


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------


class TestClassification:
    def test_zero_exit_succeeds(self, process_runner: ProcessRunner, tmp_path: Path):
        outcome = process_runner.run(python("print('hello')", tmp_path))
        assert outcome.success
        assert outcome.exit_status == 0
        assert outcome.stdout.strip() == "hello"
        assert outcome.stderr == ""

    def test_non_zero_exit_raises_with_stderr(self, process_runner: ProcessRunner, tmp_path: Path):
        code = "import sys; sys.stderr.write('boom'); sys.exit(3)"
        with pytest.raises(CommandExecutionError) as exc_info:
            process_runner.run(python(code, tmp_path))
        assert exc_info.value.stderr == "boom"
        assert exc_info.value.exit_status == 3
        assert str(exc_info.value) == "boom"

    def test_non_zero_exit_tolerated(self, process_runner: ProcessRunner, tmp_path: Path):
        code = "import sys; sys.stderr.write('boom'); sys.exit(3)"
        outcome = process_runner.run(python(code, tmp_path, allow_failures=True))
        assert not outcome.success
        assert outcome.exit_status == 3
        assert outcome.stderr == "boom"

    def test_missing_executable_raises(self, process_runner: ProcessRunner, tmp_path: Path):
        invocation = ProcessInvocation(argv=("gush-no-such-tool-xyz",), cwd=tmp_path)
        with pytest.raises(CommandExecutionError) as exc_info:
            process_runner.run(invocation)
        assert exc_info.value.exit_status == EXIT_NOT_FOUND

    def test_missing_executable_tolerated(self, process_runner: ProcessRunner, tmp_path: Path):
        invocation = ProcessInvocation(argv=("gush-no-such-tool-xyz",), cwd=tmp_path, allow_failures=True)
        outcome = process_runner.run_silent(invocation)
        assert not outcome.success
        assert outcome.exit_status == EXIT_NOT_FOUND

    def test_missing_working_directory(self, process_runner: ProcessRunner, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            process_runner.run(python("pass", tmp_path / "gone"))

    def test_runs_in_working_directory(self, process_runner: ProcessRunner, tmp_path: Path):
        outcome = process_runner.run_silent(python("import os; print(os.getcwd())", tmp_path))
        assert Path(outcome.stdout.strip()).resolve() == tmp_path.resolve()


# -----------------------------------------------------------------------------
# Timeout
# -----------------------------------------------------------------------------


class TestTimeout:
    @pytest.mark.parametrize("allow_failures", [False, True])
    def test_timeout_is_always_fatal(self, process_runner: ProcessRunner, tmp_path: Path, allow_failures: bool):
        invocation = python("import time; time.sleep(30)", tmp_path, timeout=0.5, allow_failures=allow_failures)
        started = time.monotonic()
        with pytest.raises(CommandTimeoutError) as exc_info:
            process_runner.run(invocation)
        assert time.monotonic() - started < 10
        assert exc_info.value.timeout == 0.5

    def test_timeout_keeps_partial_output(self, process_runner: ProcessRunner, tmp_path: Path):
        code = "import sys, time; sys.stdout.write('partial'); sys.stdout.flush(); time.sleep(30)"
        with pytest.raises(CommandTimeoutError) as exc_info:
            process_runner.run(python(code, tmp_path, timeout=1.0))
        assert exc_info.value.stdout == "partial"

    @pytest.mark.skipif(os.name != "posix", reason="uses POSIX process groups")
    def test_timeout_kills_grandchildren(self, process_runner: ProcessRunner, tmp_path: Path):
        invocation = ProcessInvocation(argv=("sh", "-c", "sleep 8; echo done"), cwd=tmp_path, timeout=1.0)
        started = time.monotonic()
        with pytest.raises(CommandTimeoutError) as exc_info:
            process_runner.run(invocation)
        assert time.monotonic() - started < 4
        assert exc_info.value.stdout == ""

    @pytest.mark.skipif(os.name != "posix", reason="uses POSIX tools")
    def test_background_process_holding_pipes_does_not_time_out(self, process_runner: ProcessRunner, tmp_path: Path):
        invocation = ProcessInvocation(argv=("sh", "-c", "sleep 8 & echo started"), cwd=tmp_path, timeout=5.0)
        started = time.monotonic()
        outcome = process_runner.run(invocation)
        assert time.monotonic() - started < 4
        assert outcome.success
        assert outcome.stdout == "started\n"

    @pytest.mark.skipif(os.name != "posix", reason="uses POSIX tools")
    def test_background_process_keeps_exit_status(self, process_runner: ProcessRunner, tmp_path: Path):
        invocation = ProcessInvocation(
            argv=("sh", "-c", "sleep 8 & echo oops >&2; exit 3"), cwd=tmp_path, timeout=5.0
        )
        with pytest.raises(CommandExecutionError) as exc_info:
            process_runner.run(invocation)
        assert exc_info.value.exit_status == 3
        assert exc_info.value.stderr == "oops\n"


# -----------------------------------------------------------------------------
# Streaming
# -----------------------------------------------------------------------------


class TestStreaming:
    def test_stdout_chunks_arrive_in_order(self, process_runner: ProcessRunner, tmp_path: Path):
        code = (
            "import sys, time\n"
            "sys.stdout.write('A'); sys.stdout.flush()\n"
            "time.sleep(0.3)\n"
            "sys.stdout.write('B'); sys.stdout.flush()\n"
        )
        received: list[tuple[Stream, str]] = []
        outcome = process_runner.run(python(code, tmp_path), lambda s, c: received.append((s, c)))

        assert received == [(Stream.OUT, "A"), (Stream.OUT, "B")]
        assert outcome.stdout == "AB"

    def test_streams_are_tagged(self, process_runner: ProcessRunner, tmp_path: Path):
        code = (
            "import sys, time\n"
            "sys.stdout.write('out'); sys.stdout.flush()\n"
            "time.sleep(0.2)\n"
            "sys.stderr.write('err'); sys.stderr.flush()\n"
        )
        received: list[tuple[Stream, str]] = []
        outcome = process_runner.run(python(code, tmp_path), lambda s, c: received.append((s, c)))

        assert "".join(c for s, c in received if s is Stream.OUT) == "out"
        assert "".join(c for s, c in received if s is Stream.ERR) == "err"
        assert outcome.stdout == "out"
        assert outcome.stderr == "err"

    def test_utf8_output_is_decoded(self, process_runner: ProcessRunner, tmp_path: Path):
        code = "import sys; sys.stdout.buffer.write('caf\\u00e9 \\u2713'.encode('utf-8'))"
        outcome = process_runner.run_silent(python(code, tmp_path))
        assert outcome.stdout == "café ✓"

    def test_large_output_is_concatenated(self, process_runner: ProcessRunner, tmp_path: Path):
        code = "import sys; sys.stdout.write('x' * 100000)"
        chunks: list[str] = []
        outcome = process_runner.run(python(code, tmp_path), lambda s, c: chunks.append(c))
        assert outcome.stdout == "x" * 100000
        assert "".join(chunks) == outcome.stdout

    def test_callback_error_stops_the_process(self, process_runner: ProcessRunner, tmp_path: Path):
        code = "import sys, time; print('tick', flush=True); time.sleep(30)"

        def explode(stream: Stream, chunk: str) -> None:
            raise RuntimeError("stop")

        started = time.monotonic()
        with pytest.raises(RuntimeError, match="stop"):
            process_runner.run(python(code, tmp_path), explode)
        assert time.monotonic() - started < 10


@pytest.mark.skipif(os.name != "posix", reason="uses POSIX tools")
def test_posix_true_and_false(process_runner: ProcessRunner, tmp_path: Path):
    assert process_runner.run(ProcessInvocation(argv=("true",), cwd=tmp_path)).success
    outcome = process_runner.run(ProcessInvocation(argv=("false",), cwd=tmp_path, allow_failures=True))
    assert outcome.exit_status == 1
