# minishell

The pieces of a small command shell, as a Python library: a table of shell
variables, splitting a command line into words and tokens, `$NAME`, `$?` and
`~` expansion, operator recognition and syntax checks, and the built-in
commands `echo`, `cd`, `pwd`, `export`, `unset`, `env` and `exit`.

It has no dependencies beyond the standard library.

## Installing

```
pip install .
```

## Modules

### `minishell.env`

`Environment` holds the shell's variables in insertion order. It is built from
`KEY=VALUE` strings; entries without `=` are skipped and an empty value is
stored as `None`.

- `get(key)`, `key in env`, `len(env)`, `items()`
- `export("NAME=value")` sets a variable; `export("NAME+=more")` appends to an
  existing one.
- `unset(key)` removes a variable.
- `to_envp()` renders the table as `KEY=VALUE` strings.
- `bump_shlvl()` raises `SHLVL` by one. A missing `SHLVL` becomes `1`, a
  non-numeric one is reset to `1`, and a negative or too large one to `0`.

Helpers: `parse_entry`, `parse_leading_int` (reads an integer the way `atoi`
does) and `shlvl_overflows`.

### `minishell.tokens`

- `split_words(line)` splits on white space and keeps quoted sections inside
  their word.
- `open_quote(line)` returns the quote character left unclosed, or `None`.
- `make_tokens(words)` wraps words in `Token` objects (`text`, `quoted`,
  `expanded`, `kind`); `TokenKind` names words, pipes and redirections.
- `strip_quotes(tokens)` removes the kind of quote that appears first in each
  token.
- `is_space`, `has_quotes` and `skip_quoted` are small helpers.

### `minishell.expander`

- `expand_variables(text, env, status)` replaces `$NAME` and `$?`, leaving text
  inside single quotes alone, and tells whether a variable was replaced.
- `expand_tilde(text, env, fallback_home=None)` expands a leading `~` or `~/`.
- `expand_tokens(tokens, env, status, fallback_home=None)` expands a token list
  and splits unquoted expansions on white space.
- `expand_heredoc_line(line, env, status)` expands a here-document line and
  ends it with a newline.

### `minishell.syntax`

- `split_operators(tokens)` cuts `|`, `<`, `>`, `<<` and `>>` out of words.
- `mark_operators(tokens)` sets each token's `kind`.
- `check_syntax(tokens, line)` raises `ShellSyntaxError` (its `status` is 258)
  for consecutive operators, a line ending in an operator, or a leading pipe.
- `has_empty_quotes`, `operator_kind`, `exact_operator_kind` and the individual
  checks are available on their own.

### `minishell.builtins`

`run_builtin(argv, env, status, out)` runs the builtin named by `argv[0]`,
writes its output to the text stream `out` and returns the new exit status.
Each builtin also has its own function (`builtin_echo`, `builtin_cd`,
`builtin_pwd`, `builtin_env`, `builtin_export`, `builtin_unset`,
`builtin_exit`). `exit` raises `ShellExit`, whose `status` is the status the
shell should end with. `is_builtin(name)` tells whether a name is a builtin.

## Example

```python
import io

from minishell.builtins import run_builtin
from minishell.env import Environment
from minishell.expander import expand_tokens
from minishell.syntax import check_syntax, mark_operators, split_operators
from minishell.tokens import make_tokens, split_words, strip_quotes

env = Environment(["HOME=/home/user", "NAME=world"])
line = 'echo "hello $NAME"'

tokens = make_tokens(split_words(line))
tokens = expand_tokens(tokens, env, 0)
tokens = mark_operators(split_operators(tokens))
tokens = strip_quotes(tokens)
check_syntax(tokens, line)

out = io.StringIO()
status = run_builtin([t.text for t in tokens], env, 0, out)
print(out.getvalue(), end="")  # hello world
```

## What it does not do

This package is a library only. It has no interactive prompt and no command to
start, it does not build pipelines from the token list, it does not open
redirection files or read here-documents, and it does not start external
programs. Only the built-in commands can be run.

## Tests

```
pip install .[test]
pytest
```