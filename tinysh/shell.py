"""Interactive shell with pipelines, background jobs and command history."""

from __future__ import annotations

import argparse
import io
import os
import subprocess
import sys
import threading
from pathlib import Path
from typing import IO, Sequence, TextIO

from tinysh.history import DEFAULT_HISTORY_FILE, History
from tinysh.parsing import NO_MARK, REPEAT_LAST, check_mark, parse_line, split_pipeline

PROMPT = "> "
_QUIT_WORDS = ("quit", "exit")
_HOME_WORDS = ("~", "$HOME")


class ExitShell(Exception):
    """Raised by the ``quit`` and ``exit`` built-ins to end the session."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


class Shell:
    """A small shell that runs programs, pipelines and a few built-ins."""

    def __init__(
        self,
        history_path: str | os.PathLike[str] = DEFAULT_HISTORY_FILE,
        out: TextIO | None = None,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.start_dir = Path.cwd()
        path = Path(history_path)
        if not path.is_absolute():
            path = self.start_dir / path
        self.history = History(path)
        self.history.load()
        self._background: list[subprocess.Popen[bytes]] = []

    # output helpers

    def _write(self, text: str) -> None:
        if text:
            self.out.write(text)

    def _emit(self, data: bytes) -> None:
        self._write(data.decode(errors="replace"))

    def _flush(self) -> None:
        flush = getattr(self.out, "flush", None)
        if flush is not None:
            flush()

    def _out_fd(self) -> int | None:
        try:
            return self.out.fileno()
        except (AttributeError, OSError, ValueError):
            return None

    def _pump(self, stream: IO[bytes]) -> None:
        data = stream.read()
        stream.close()
        self._emit(data)

    @staticmethod
    def _feed(stream: IO[bytes], data: bytes) -> None:
        try:
            stream.write(data)
        except BrokenPipeError:
            pass
        finally:
            try:
                stream.close()
            except BrokenPipeError:
                pass

    def _start_thread(self, target, *args) -> threading.Thread:
        thread = threading.Thread(target=target, args=args, daemon=True)
        thread.start()
        return thread

    # evaluation

    def evaluate(self, cmdline: str, mark: int = NO_MARK) -> None:
        """Evaluate one command line; ``mark`` is the result of ``check_mark``."""
        if mark == NO_MARK:
            self.history.record(cmdline)
        segments = split_pipeline(cmdline)
        if len(segments) > 1:
            parsed = [parse_line(segment) for segment in segments]
            if any(command.is_empty for command in parsed):
                return
            self._run_pipeline([command.argv for command in parsed], parsed[-1].background)
            return
        command = parse_line(cmdline)
        if command.is_empty:
            return
        if not self.run_builtin(command.argv, mark):
            self._spawn(command.argv, command.background, cmdline)

    def _spawn(self, argv: list[str], background: bool, cmdline: str) -> None:
        out_fd = self._out_fd()
        self._flush()
        try:
            proc = subprocess.Popen(
                argv, stdout=out_fd if out_fd is not None else subprocess.PIPE
            )
        except OSError:
            self._write(f"{argv[0]}: Command not found.\n")
            return
        if background:
            self._write(f"{proc.pid} {cmdline}")
            self._background.append(proc)
            if proc.stdout is not None:
                self._start_thread(self._pump, proc.stdout)
            return
        data, _ = proc.communicate()
        if data:
            self._emit(data)

    def _cd_target(self, target: str | None) -> tuple[str | None, str]:
        shown = target if target is not None else "(null)"
        if target is None or target in _HOME_WORDS:
            return os.environ.get("HOME"), shown
        return target, shown

    def _pipeline_builtin(self, argv: list[str]) -> str | None:
        """Output of a built-in run as a pipeline stage, or None for a program."""
        name = argv[0]
        if name in _QUIT_WORDS:
            self.history.save()
            return ""
        if name == "&":
            return ""
        if name == "cd":
            dest, shown = self._cd_target(argv[1] if len(argv) > 1 else None)
            if dest is None or not os.path.isdir(dest):
                return f"bash : cd : {shown}: No such file or directory\n"
            return ""
        if name == "history":
            return self.history.format()
        return None

    def _run_pipeline(self, stages: Sequence[list[str]], background: bool) -> None:
        out_fd = self._out_fd()
        self._flush()
        procs: list[subprocess.Popen[bytes]] = []
        feeders: list[threading.Thread] = []
        previous: IO[bytes] | None = None
        feed: bytes | None = None
        tail_proc: subprocess.Popen[bytes] | None = None
        last_index = len(stages) - 1
        for index, argv in enumerate(stages):
            is_last = index == last_index
            text = self._pipeline_builtin(argv)
            proc = None
            if text is None:
                if previous is not None:
                    stdin = previous
                elif feed is not None:
                    stdin = subprocess.PIPE
                else:
                    stdin = None
                stdout = out_fd if is_last and out_fd is not None else subprocess.PIPE
                try:
                    proc = subprocess.Popen(argv, stdin=stdin, stdout=stdout)
                except OSError:
                    text = f"{argv[0]}: Command not found.\n"
            if previous is not None:
                previous.close()
                previous = None
            if proc is not None:
                if feed is not None and proc.stdin is not None:
                    feeders.append(self._start_thread(self._feed, proc.stdin, feed))
                feed = None
                procs.append(proc)
                if is_last:
                    tail_proc = proc
                else:
                    previous = proc.stdout
            elif is_last:
                self._write(text)
            else:
                feed = text.encode()
        if background:
            self._background.extend(procs)
            if tail_proc is not None and tail_proc.stdout is not None:
                self._start_thread(self._pump, tail_proc.stdout)
            return
        if tail_proc is not None and tail_proc.stdout is not None:
            self._pump(tail_proc.stdout)
        for thread in feeders:
            thread.join()
        for proc in procs:
            proc.wait()
        for proc in self._background:
            proc.wait()
        self._background.clear()

    # built-ins

    def run_builtin(self, argv: list[str], mark: int = NO_MARK) -> bool:
        """Run ``argv`` if it is a built-in; return True when it was one."""
        name = argv[0]
        if name in _QUIT_WORDS:
            self.quit()
        if name == "&":
            return True
        if name == "cd":
            self.change_directory(argv[1] if len(argv) > 1 else None)
            return True
        if name == "history":
            self._write(self.history.format())
            return True
        if mark == REPEAT_LAST or mark > 0:
            try:
                entry = self.history.last() if mark == REPEAT_LAST else self.history.get(mark)
            except KeyError:
                self._write(f"{name}: event not found\n")
                return True
            self._write(entry.command)
            self.evaluate(entry.command, NO_MARK)
            return True
        return False

    def change_directory(self, target: str | None = None) -> bool:
        """Change the working directory; no target, ``~`` or ``$HOME`` means home."""
        dest, shown = self._cd_target(target)
        try:
            if dest is None:
                raise FileNotFoundError(shown)
            os.chdir(dest)
        except OSError:
            self._write(f"bash : cd : {shown}: No such file or directory\n")
            return False
        return True

    def quit(self) -> None:
        """Save the history in the starting directory and end the session."""
        os.chdir(self.start_dir)
        self.history.save()
        raise ExitShell(0)

    def loop(self, stream: TextIO) -> int:
        """Read and evaluate lines from ``stream`` until end of input or quit."""
        while True:
            self._write(PROMPT)
            self._flush()
            line = stream.readline()
            if not line.endswith("\n"):
                return 0
            try:
                self.evaluate(line, check_mark(line))
            except ExitShell as stop:
                self._flush()
                return stop.code


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive session on standard input."""
    parser = argparse.ArgumentParser(prog="tinysh", description="A small interactive shell.")
    parser.add_argument(
        "--history-file",
        default=DEFAULT_HISTORY_FILE,
        help="file the command history is read from and saved to",
    )
    args = parser.parse_args(argv)
    shell = Shell(args.history_file)
    return shell.loop(sys.stdin)


if __name__ == "__main__":
    raise SystemExit(main())