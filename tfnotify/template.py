"""Message templates that present parsed terraform results."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Iterator, Mapping, Union

DEFAULT_DEFAULT_TITLE = "## Terraform result"
DEFAULT_FMT_TITLE = "## Fmt result"
DEFAULT_VALIDATE_TITLE = "## Validate result"
DEFAULT_PLAN_TITLE = "## Plan result"
DEFAULT_DESTROY_WARNING_TITLE = "## WARNING: Resource Deletion will happen"
DEFAULT_APPLY_TITLE = "## Apply result"

_STANDARD_TEMPLATE = """
{{ .Title }}

{{ .Message }}

{{if .Result}}
<pre><code>{{ .Result }}
</code></pre>
{{end}}

<details><summary>Details (Click me)</summary>

<pre><code>{{ .Body }}
</code></pre></details>
"""

DEFAULT_DEFAULT_TEMPLATE = _STANDARD_TEMPLATE
DEFAULT_FMT_TEMPLATE = _STANDARD_TEMPLATE
DEFAULT_VALIDATE_TEMPLATE = _STANDARD_TEMPLATE
DEFAULT_PLAN_TEMPLATE = _STANDARD_TEMPLATE
DEFAULT_APPLY_TEMPLATE = _STANDARD_TEMPLATE
DEFAULT_DESTROY_WARNING_TEMPLATE = """
{{ .Title }}

This plan contains resource delete operation. Please check the plan result very carefully!

{{if .Result}}
<pre><code>{{ .Result }}
</code></pre>
{{end}}
"""


class TemplateError(ValueError):
    """Raised when a template cannot be parsed."""


@dataclass
class CommonTemplate:
    """Values that a template is filled with."""

    title: str = ""
    message: str = ""
    result: str = ""
    body: str = ""
    link: str = ""
    use_raw_output: bool = False


# --- template language -------------------------------------------------------

_WHITESPACE = " \t\r\n"
_FIELD = re.compile(r"\.([A-Za-z_][A-Za-z0-9_]*)")
_MISSING = object()

_HTML_ESCAPES = str.maketrans(
    {
        "\0": "\ufffd",
        '"': "&#34;",
        "&": "&amp;",
        "'": "&#39;",
        "+": "&#43;",
        "<": "&lt;",
        ">": "&gt;",
    }
)


@dataclass
class _Text:
    text: str


@dataclass
class _Field:
    name: str


@dataclass
class _If:
    condition: str
    then: list[_Node]
    otherwise: list[_Node]


_Node = Union[_Text, _Field, _If]


def _tokenize(source: str) -> list[tuple[bool, str]]:
    """Split a template into (is_action, text) pieces, applying trim markers."""
    tokens: list[tuple[bool, str]] = []
    rest = source
    trim_next = False
    while True:
        start = rest.find("{{")
        text = rest if start < 0 else rest[:start]
        if trim_next:
            text = text.lstrip(_WHITESPACE)
        if start < 0:
            if text:
                tokens.append((False, text))
            return tokens
        end = rest.find("}}", start + 2)
        if end < 0:
            raise TemplateError("unclosed action")
        inner = rest[start + 2 : end]
        rest = rest[end + 2 :]
        trim_left = len(inner) >= 2 and inner[0] == "-" and inner[1] in _WHITESPACE
        trim_right = len(inner) >= 2 and inner[-1] == "-" and inner[-2] in _WHITESPACE
        if trim_left:
            text = text.rstrip(_WHITESPACE)
            inner = inner[1:]
        if trim_right:
            inner = inner[:-1]
        if text:
            tokens.append((False, text))
        trim_next = trim_right
        action = inner.strip()
        if action.startswith("/*"):
            if not action.endswith("*/"):
                raise TemplateError("unclosed comment")
            continue
        if not action:
            raise TemplateError("missing value for command")
        tokens.append((True, action))


def _field_name(expression: str) -> str:
    match = _FIELD.fullmatch(expression.strip())
    if not match:
        raise TemplateError(f"unsupported expression: {expression!r}")
    return match.group(1)


def _parse_block(tokens: Iterator[tuple[bool, str]]) -> tuple[list[_Node], str | None, str]:
    """Parse nodes until an ``else`` or ``end`` action or the end of input."""
    nodes: list[_Node] = []
    for is_action, value in tokens:
        if not is_action:
            nodes.append(_Text(value))
            continue
        keyword, *arguments = value.split(None, 1)
        argument = arguments[0].strip() if arguments else ""
        if keyword in ("end", "else"):
            return nodes, keyword, argument
        if keyword == "if":
            nodes.append(_parse_if(tokens, argument))
        else:
            nodes.append(_Field(_field_name(value)))
    return nodes, None, ""


def _parse_if(tokens: Iterator[tuple[bool, str]], argument: str) -> _If:
    if not argument:
        raise TemplateError("missing value for if")
    condition = _field_name(argument)
    then, stop, rest = _parse_block(tokens)
    otherwise: list[_Node] = []
    if stop == "else":
        if rest:
            keyword, *arguments = rest.split(None, 1)
            if keyword != "if":
                raise TemplateError(f"unexpected {rest!r} after else")
            otherwise = [_parse_if(tokens, arguments[0] if arguments else "")]
        else:
            otherwise, stop, rest = _parse_block(tokens)
            if stop != "end":
                raise TemplateError("missing {{end}} after {{else}}")
    elif stop != "end":
        raise TemplateError("missing {{end}}")
    if stop == "end" and rest:
        raise TemplateError("unexpected argument to end")
    return _If(condition, then, otherwise)


def _parse(source: str) -> list[_Node]:
    nodes, stop, _ = _parse_block(iter(_tokenize(source)))
    if stop is not None:
        raise TemplateError(f"unexpected {{{{{stop}}}}}")
    return nodes


def _stringify(value: Any, raw: bool) -> str:
    if value is _MISSING or value is None:
        return "<no value>" if raw else ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _evaluate(nodes: list[_Node], data: Mapping[str, Any], raw: bool) -> Iterator[str]:
    for node in nodes:
        if isinstance(node, _Text):
            yield node.text
        elif isinstance(node, _Field):
            text = _stringify(data.get(node.name, _MISSING), raw)
            yield text if raw else text.translate(_HTML_ESCAPES)
        else:
            value = data.get(node.condition)
            branch = node.then if value else node.otherwise
            yield from _evaluate(branch, data, raw)


def render(name: str, template: str, data: Mapping[str, Any], use_raw_output: bool) -> str:
    """Fill ``template`` with ``data``; values are HTML-escaped unless raw."""
    try:
        nodes = _parse(template)
    except TemplateError as exc:
        raise TemplateError(f"template: {name}: {exc}") from exc
    return "".join(_evaluate(nodes, data, use_raw_output))


# --- templates -------------------------------------------------------------


class Template:
    """A message template for one kind of terraform command."""

    name: ClassVar[str] = "template"
    default_title: ClassVar[str] = DEFAULT_DEFAULT_TITLE
    default_template: ClassVar[str] = DEFAULT_DEFAULT_TEMPLATE

    def __init__(self, template: str = "") -> None:
        self.template = template or self.default_template
        self._value = CommonTemplate()

    @property
    def value(self) -> CommonTemplate:
        """The values the template is filled with."""
        return self._value

    @value.setter
    def value(self, value: CommonTemplate) -> None:
        if not value.title:
            value = dataclasses.replace(value, title=self.default_title)
        self._value = value

    def _data(self) -> dict[str, Any]:
        return {
            "Title": self._value.title,
            "Message": self._value.message,
            "Result": self._value.result,
            "Body": self._value.body,
            "Link": self._value.link,
        }

    def execute(self) -> str:
        """Render the template with the current values."""
        return render(self.name, self.template, self._data(), self._value.use_raw_output)


class DefaultTemplate(Template):
    """Template for an arbitrary terraform command; its result is the body."""

    name = "default"
    default_title = DEFAULT_DEFAULT_TITLE
    default_template = DEFAULT_DEFAULT_TEMPLATE

    def execute(self) -> str:
        data = self._data()
        data["Result"] = ""
        data["Body"] = self._value.result
        return render(self.name, self.template, data, self._value.use_raw_output)


class FmtTemplate(Template):
    """Template for terraform fmt."""

    name = "fmt"
    default_title = DEFAULT_FMT_TITLE
    default_template = DEFAULT_FMT_TEMPLATE


class ValidateTemplate(Template):
    """Template for terraform validate."""

    name = "validate"
    default_title = DEFAULT_VALIDATE_TITLE
    default_template = DEFAULT_VALIDATE_TEMPLATE


class PlanTemplate(Template):
    """Template for terraform plan."""

    name = "plan"
    default_title = DEFAULT_PLAN_TITLE
    default_template = DEFAULT_PLAN_TEMPLATE


class DestroyWarningTemplate(Template):
    """Template warning that a plan destroys resources."""

    name = "destroy_warning"
    default_title = DEFAULT_DESTROY_WARNING_TITLE
    default_template = DEFAULT_DESTROY_WARNING_TEMPLATE


class ApplyTemplate(Template):
    """Template for terraform apply."""

    name = "apply"
    default_title = DEFAULT_APPLY_TITLE
    default_template = DEFAULT_APPLY_TEMPLATE