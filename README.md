# minishell

The core of a small POSIX-style shell, usable as a library:

- splitting a command line into words, keeping quoted spans together;
- an environment table with bash-like `export` / `unset` semantics,
  including variables declared without a value;
- the builtins `echo`, `cd`, `pwd`, `env`, `export`, `unset` and `exit`,
  with the same messages and exit statuses a shell user expects;
- heredoc handling with `$VAR` and `$?` expansion;
- command lookup along `PATH`, with the usual 126/127 error statuses;
- an executor for command trees with `&&`, `||`, pipes, parentheses and
  redirections (`<`, `>`, `>>`, `<<`).

## Installation

Install the package into your environment with your usual tool, for
example from a checkout of this directory. The test suite needs the
`test` extra (pytest).

## Examples

Splitting a line into words, quotes grouping what is inside them:

```python
from minishell.wordsplit import string_to_matrix

string_to_matrix('This is a "test string" with \'quotes\'')
# ['This', 'is', 'a', 'test string', 'with', 'quotes']
```

Checking identifiers the way `export` and `unset` do:

```python
from minishell.exporting import is_valid_var

is_valid_var("_name1")   # True
is_valid_var("1name")    # False
```

Comparing an environment key against a `KEY=value` line:

```python
from minishell.environment import compare_var

compare_var("PATH", "PATH=/usr/bin")   # True
compare_var("PAT", "PATH=/usr/bin")    # False
```

The last exit status is kept process-wide, as `$?` is in a shell:

```python
from minishell.status import exit_status, update_exit_status

update_exit_status(127)
exit_status()   # 127
```

## Modules

| Module | Purpose |
| --- | --- |
| `minishell.tokens` | token kinds, tokens and command trees |
| `minishell.status` | the last exit status |
| `minishell.wordsplit` | quote-aware word splitting |
| `minishell.environment` | the environment table |
| `minishell.exporting` | `export` and its sorted listing |
| `minishell.builtins` | `echo`, `cd`, `pwd`, `env`, `unset`, `exit` |
| `minishell.paths` | `PATH` lookup and command error statuses |
| `minishell.heredoc` | heredoc reading and expansion |
| `minishell.executor` | running command trees |