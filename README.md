# tinysh

A small interactive shell for POSIX systems. It reads command lines, runs
programs found on `PATH`, connects them with pipes, and keeps a command
history in a text file between sessions.

## Installing

```
pip install .
```

## Running

```
tinysh
tinysh --history-file my_history.txt
```

The shell prints a `> ` prompt and reads one command line at a time. End of
input closes it.

`--history-file` names the file the history is loaded from at start-up and
saved to on `quit`/`exit` (default `history.txt`). A relative path is taken
from the directory the shell was started in; a missing file is created
empty.

## What it understands

- Plain commands: `ls -al`. Words are separated by spaces only.
- Background jobs: a final word starting with `&` runs the command without
  waiting; the shell prints the process id followed by the command line.
- Pipelines: `ls | grep py | wc -l`. A `|` inside single or double quotes is
  not treated as a pipe, and the quote characters are removed from the
  pipeline's stages. A pipeline with an empty stage is ignored.
- Built-in commands:
  - `cd [dir]` — change directory; no argument, `~` or `$HOME` goes to
    `$HOME`. On failure it prints
    `bash : cd : <dir>: No such file or directory`.
  - `history` — list previous commands as `N  command`. Typing `history`
    twice in a row records it only once.
  - `quit` / `exit` — return to the starting directory, save the history and
    leave. The `quit`/`exit` line itself is not saved.
- History expansion:
  - `!!` prints and runs the most recent command again.
  - `!N` prints and runs command number `N`. An unknown number prints
    `!N: event not found`.
  - Lines that are history references are not themselves recorded.

A program that cannot be started prints `<name>: Command not found.`

## What it does not do

There is no input or output redirection (`<`, `>`), no job control
(`jobs`, `fg`, `bg`), no signal handling for the jobs it starts, no
variable expansion apart from the `$HOME` argument to `cd`, and no quoting
of words within a single command: quotes only matter for splitting a
pipeline.

## Using it from Python

- `tinysh.parsing` — `parse_line(line)` returns a `ParsedCommand` with
  `argv`, `background` and `is_empty`; `split_pipeline(line)` splits on
  unquoted `|`; `check_mark(line)` returns `REPEAT_LAST` (-1) for `!!`, `N`
  for `!N`, and `NO_MARK` (0) otherwise.
- `tinysh.history` — `History(path)` with `load`, `save`, `add`, `record`,
  `get`, `last`, `format`, iteration and `len`; entries are `HistoryEntry`
  objects with `number` and `command`. `get` and `last` raise `KeyError`
  when there is no such entry.
- `tinysh.shell` — `Shell(history_path, out)` with `evaluate`,
  `run_builtin`, `change_directory`, `quit` and `loop(stream)`; `quit`
  raises `ExitShell`, whose `code` `loop` returns. `main(argv)` is the
  command-line entry point.
- `tinysh.rio` — robust I/O over file descriptors: `read_n(fd, n)` and
  `write_n(fd, data)` retry until done or end of file; `RioReader(fd)`
  buffers reads with `read`, `read_n`, `read_line(maxlen)` and line
  iteration. `open_client(hostname, port)` connects over TCP (raising
  `ConnectionError` if no address works) and `open_listener(port)` returns a
  listening socket (raising `OSError` on failure). `to_base(value, base)`
  formats a non-negative integer in bases 2 to 36.

```python
from tinysh.parsing import parse_line, split_pipeline

cmd = parse_line("sleep 5 &\n")
print(cmd.argv, cmd.background)          # ['sleep', '5'] True
print(split_pipeline("echo 'a|b' | wc\n"))  # ['echo a|b ', ' wc']
```

## Running the tests

```
pip install .[test]
pytest
```