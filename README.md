# tfnotify

Turn the output of Terraform commands into short, readable notification
messages, for example the text of a comment on a pull request.

The package does two things:

* **Parsing**: `tfnotify.parser` reads the text printed by `terraform fmt`,
  `terraform validate`, `terraform plan` or `terraform apply` and reports what
  happened in a `ParseResult`. The result holds the key line or the error block,
  says whether a plan destroys resources, has no changes, has an error, or only
  adds and updates, and carries an `ExitCode` of `PASS` or `FAIL`.
* **Rendering**: `tfnotify.template` fills a message template with a title, a
  message, the parsed result and the full output. Values are HTML-escaped
  unless raw output is requested.

## Installation

```
pip install .
```

Python 3.10 or later is required. The package has no runtime dependencies.

## Parsing output

```python
from tfnotify.parser import ExitCode, PlanParser

with open("plan.log", encoding="utf-8") as fh:
    output = fh.read()

result = PlanParser().parse(output)
print(result.result)          # e.g. "Plan: 1 to add, 0 to change, 0 to destroy."
print(result.has_destroy)     # True when at least one resource is destroyed
print(result.exit_code is ExitCode.PASS)
```

`ApplyParser` works the same way. It reports the `Apply complete!` line or the
error block. When plan or apply output cannot be recognised, the result has
`exit_code` set to `ExitCode.FAIL` and `error` set to a message such as
`"cannot parse plan result"`.

`FmtParser` reports a failure when the output contains a diff hunk.
`ValidateParser` reports a failure when the output contains an `Error:` line.
If neither finds anything, it returns an empty, passing result.
`DefaultParser` passes the output through unchanged.

`trim_last_newline(lines)` drops a single trailing empty string from a list of
lines. The parsers use it to tidy error blocks.

## Rendering a message

```python
from tfnotify.template import CommonTemplate, PlanTemplate

template = PlanTemplate("")          # an empty string selects the built-in template
template.value = CommonTemplate(
    message="Triggered by a merge to main",
    result=result.result,
    body=output,
)
print(template.execute())
```

When `value` is set with an empty title, the template's default heading is
used instead, for example `## Plan result`. The other templates are:

* `FmtTemplate`
* `ValidateTemplate`
* `ApplyTemplate`
* `DestroyWarningTemplate`, a warning that a plan deletes resources
* `DefaultTemplate`, which shows its `result` as the body

Templates use `{{ .Title }}`, `{{ .Message }}`, `{{ .Result }}`, `{{ .Body }}`
and `{{ .Link }}` fields. They also support `{{if .Field}} ... {{else}} ...
{{end}}` blocks, comments and `-` trim markers.

Set `use_raw_output=True` on `CommonTemplate` to skip HTML escaping. The
lower-level `render(name, template, data, use_raw_output)` fills any template
from a mapping. A template that cannot be parsed raises `TemplateError`.

## What the package does not do

The package builds message text only. It does not:

* run Terraform;
* post messages to any chat or code-review service;
* read a configuration file;
* provide a command-line program.

Pass the rendered string to whatever delivers your notifications.

## Running the tests

```
pip install ".[test]"
pytest
```