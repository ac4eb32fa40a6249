"""
Process runner: the single chokepoint for external commands.

Runs an argv in a working directory with a hard timeout, streams stdout and
stderr chunks to a callback as they arrive, and classifies the run by exit
status only.

Key invariants:
- success == (exit_status == 0), never inferred from output
- timeout is fatal regardless of allow_failures
- allow_failures suppresses the raise, never the recorded outcome
"""

from __future__ import annotations

import codecs
import logging
import os
import queue
import signal
import subprocess
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Callable, NoReturn

from .errors import CommandExecutionError, CommandTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3600.0

# Exit status a POSIX shell reports for a command it cannot find.
EXIT_NOT_FOUND = 127

_CHUNK_SIZE = 4096

# How often the child is polled while waiting for output.
_POLL_INTERVAL = 0.05

# How long to keep reading after the child exits or is killed.
_DRAIN_GRACE = 0.5

_POSIX = os.name == "posix"


class Stream(str, Enum):
    """Which pipe a chunk came from."""

    OUT = "out"
    ERR = "err"


OutputCallback = Callable[[Stream, str], None]


@dataclass(frozen=True)
class ProcessInvocation:
    """A command line to execute."""

    argv: tuple[str, ...]
    cwd: Path = field(default_factory=Path.cwd)
    timeout: float = DEFAULT_TIMEOUT
    allow_failures: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "argv", tuple(str(a) for a in self.argv))
        object.__setattr__(self, "cwd", Path(self.cwd))
        if not self.argv:
            raise ValueError("argv must not be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def summary(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class ProcessOutcome:
    """Captured result of a finished process."""

    stdout: str
    stderr: str
    exit_status: int

    @property
    def success(self) -> bool:
        return self.exit_status == 0


def _pump(pipe: IO[bytes], tag: Stream, sink: queue.Queue) -> None:
    """Forward decoded chunks from a pipe to the queue, then a None sentinel."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    try:
        while True:
            data = pipe.read1(_CHUNK_SIZE)  # type: ignore[attr-defined]
            if not data:
                break
            text = decoder.decode(data)
            if text:
                sink.put((tag, text))
        tail = decoder.decode(b"", final=True)
        if tail:
            sink.put((tag, tail))
    except OSError as e:
        logger.debug("Reading %s pipe failed: %s", tag.value, e)
    finally:
        pipe.close()
        sink.put((tag, None))


def _flush(
    sink: queue.Queue,
    chunks: dict[Stream, list[str]],
    on_output: OutputCallback | None,
) -> None:
    """Take whatever the readers have already queued."""
    while True:
        try:
            tag, chunk = sink.get_nowait()
        except queue.Empty:
            return
        if chunk is None:
            continue
        chunks[tag].append(chunk)
        if on_output is not None:
            on_output(tag, chunk)


def _kill(proc: subprocess.Popen) -> None:
    """Kill the child and, on POSIX, every process in its group."""
    if not _POSIX:
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class ProcessRunner:
    """
    Execute external commands one at a time.

    The calling thread blocks until the child exits or the timeout elapses.
    Two reader threads drain the pipes into a queue; the callback always
    runs on the calling thread.

    On POSIX the child leads its own process group, so a timeout kills
    everything it started. Once the child has exited, output from
    descendants still holding the pipes is read for a short grace period
    and then abandoned; the outcome is classified by the child's status.
    """

    def run(
        self,
        invocation: ProcessInvocation,
        on_output: OutputCallback | None = None,
    ) -> ProcessOutcome:
        """
        Run the invocation, streaming output to on_output.

        Raises:
            FileNotFoundError: If the working directory does not exist.
            CommandTimeoutError: If the timeout elapsed.
            CommandExecutionError: If the exit status is non-zero and
                the invocation is not failure-tolerant.
        """
        if not invocation.cwd.is_dir():
            raise FileNotFoundError(f"Working directory does not exist: {invocation.cwd}")

        logger.debug("Running %s in %s", invocation.summary(), invocation.cwd)

        try:
            proc = subprocess.Popen(
                list(invocation.argv),
                cwd=invocation.cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=_POSIX,
            )
        except OSError as e:
            logger.debug("Could not start %s: %s", invocation.argv[0], e)
            outcome = ProcessOutcome(stdout="", stderr=f"{e}\n", exit_status=EXIT_NOT_FOUND)
            if on_output is not None:
                on_output(Stream.ERR, outcome.stderr)
            return self._classify(invocation, outcome)

        # Pipes are closed by their reader threads, never from here.
        outcome = self._collect(proc, invocation, on_output)

        logger.debug("%s exited with status %d", invocation.summary(), outcome.exit_status)
        return self._classify(invocation, outcome)

    def run_silent(self, invocation: ProcessInvocation) -> ProcessOutcome:
        """Run without streaming; only the final outcome matters."""
        return self.run(invocation, on_output=None)

    def _collect(
        self,
        proc: subprocess.Popen,
        invocation: ProcessInvocation,
        on_output: OutputCallback | None,
    ) -> ProcessOutcome:
        sink: queue.Queue = queue.Queue()
        readers = [
            threading.Thread(target=_pump, args=(proc.stdout, Stream.OUT, sink), daemon=True),
            threading.Thread(target=_pump, args=(proc.stderr, Stream.ERR, sink), daemon=True),
        ]
        for reader in readers:
            reader.start()

        chunks: dict[Stream, list[str]] = {Stream.OUT: [], Stream.ERR: []}
        deadline = time.monotonic() + invocation.timeout
        drain_until: float | None = None
        open_streams = len(readers)

        try:
            while open_streams:
                now = time.monotonic()
                if drain_until is None:
                    if proc.poll() is not None:
                        drain_until = min(now + _DRAIN_GRACE, deadline)
                    elif now >= deadline:
                        self._timeout(proc, readers, sink, invocation, chunks)
                if drain_until is not None and now >= drain_until:
                    logger.debug("%s left its output pipes open, not waiting for them", invocation.summary())
                    _flush(sink, chunks, on_output)
                    break
                limit = deadline if drain_until is None else drain_until
                try:
                    tag, chunk = sink.get(timeout=min(limit - now, _POLL_INTERVAL))
                except queue.Empty:
                    continue
                if chunk is None:
                    open_streams -= 1
                    continue
                chunks[tag].append(chunk)
                if on_output is not None:
                    on_output(tag, chunk)

            try:
                exit_status = proc.wait(timeout=max(deadline - time.monotonic(), 0.001))
            except subprocess.TimeoutExpired:
                self._timeout(proc, readers, sink, invocation, chunks)
        except BaseException:
            if proc.poll() is None:
                _kill(proc)
                proc.wait()
            raise

        return ProcessOutcome(
            stdout="".join(chunks[Stream.OUT]),
            stderr="".join(chunks[Stream.ERR]),
            exit_status=exit_status,
        )

    def _timeout(
        self,
        proc: subprocess.Popen,
        readers: list[threading.Thread],
        sink: queue.Queue,
        invocation: ProcessInvocation,
        chunks: dict[Stream, list[str]],
    ) -> NoReturn:
        logger.debug("%s timed out after %gs, killing", invocation.summary(), invocation.timeout)
        _kill(proc)
        proc.wait()
        for reader in readers:
            reader.join(timeout=_DRAIN_GRACE)
        _flush(sink, chunks, None)
        raise CommandTimeoutError(
            invocation.argv,
            invocation.timeout,
            stdout="".join(chunks[Stream.OUT]),
            stderr="".join(chunks[Stream.ERR]),
        )

    def _classify(self, invocation: ProcessInvocation, outcome: ProcessOutcome) -> ProcessOutcome:
        if not outcome.success and not invocation.allow_failures:
            raise CommandExecutionError(outcome.stderr, outcome.exit_status, invocation.argv)
        return outcome
