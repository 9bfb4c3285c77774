# minishell

A small interactive shell. It shows the prompt `minishell[$]~>: ` and reads a
line. It splits the line into commands joined by pipes and applies their
redirections. Each command then runs as a builtin, or as a program found on
`PATH`.

## Installing

```
pip install .
```

## Running

```
minishell
```

The shell takes no arguments. If you give it any, it returns status 1 at once.
At end of input (Ctrl-D) it quits with the exit status of the last command.
Ctrl-C at the prompt drops the current line and sets the status to 1. SIGQUIT
is ignored while the shell runs. When Python's `readline` module is available,
the prompt supports line editing and history.

## Command lines

- **Quotes.** Single quotes keep their contents literal. Double quotes still
  expand variables. An unmatched quote is reported as
  `unexpected EOF while looking for matching.` and sets the status to 2.
- **Variables.**
  - `$NAME` expands to the value of a variable, split on blanks into words.
  - The first word takes the variable's place. Any further words go at the end
    of the line.
  - `$?` expands to the last exit status.
  - `$` followed by a digit expands to nothing.
  - A lone `$` stops expansion for the rest of the line.
- **Pipes.** `cmd1 | cmd2 | cmd3` runs a pipeline. Its status is that of the
  last command.
- **Redirections.**
  - `< file` reads input from a file.
  - `> file` truncates the file and writes to it.
  - `>> file` appends to the file.
  - `<< WORD` reads a here-document up to a line equal to `WORD`, or to end of
    input.
  - In a here-document, a line that contains `$` is replaced as a whole by the
    value of the variable named by the rest of the line after its first
    character. So `$HOME` becomes the value of `HOME` and `$?` becomes the last
    status.
  - A file that cannot be opened is reported and sets the status to 1.
- **Syntax errors.** These are reported as
  `minishell: syntax error near unexpected token ...` with status 2:
  - a pipe at the start or end of a line;
  - two pipes in a row;
  - a redirection with no word after it.

## Builtins

| command                 | effect |
|-------------------------|--------|
| `echo [-n] args`        | print the arguments; leading `-n`, `-nn`, ... drop the newline |
| `pwd`                   | print the current directory |
| `cd [dir]`              | change directory, going to `$HOME` without an argument; updates `PWD` and `OLDPWD` |
| `env`                   | list the variables that have a value; refuses arguments |
| `export [NAME[=value]]` | set variables, or list them all as `declare -x` lines |
| `unset NAME...`         | remove variables |
| `exit [n]`              | leave the shell with status `n` (modulo 256) |

Notes on `exit`:

- A non-numeric argument is reported and exits with 255.
- More than one argument is reported, and the shell stays open with status 1.

Inside a pipeline, every stage works on its own copy of the shell state. So
`cd`, `export` or `exit` in a pipeline do not affect the shell itself.

Anything else is looked up in the directories of `PATH`. A name that begins
with `/` or `.` is run directly. A command that cannot be found gives
status 127. One that exists but cannot be run, such as a directory or a file
without execute permission, gives 126.

## Using it from Python

- `minishell.shell.run_line(state, line)` runs one line against a
  `minishell.environment.ShellState`, which holds an `Environment` and the last
  exit status. It returns the new status, and raises
  `minishell.builtins.ShellExit` when the line runs `exit`.
- The stages are also available on their own:
  - `minishell.lexer.tokenize` turns a line into tokens.
  - `minishell.analyser.analyse` tokenizes, expands and checks a line.
  - `minishell.parser.parse` builds `Command` objects from the tokens.
  - `minishell.executor.run_commands` runs them.

## What it does not do

This shell has no:

- command separators such as `;`, `&&` or `||`;
- background jobs or job control;
- wildcard expansion;
- backslash escapes;
- scripts given as files;
- history saved between sessions.

## Tests

```
pip install .[test]
pytest
```