"""Template expressions.

Description templates embed ``{expression}`` tokens, e.g. ``{mod.name}`` or
``{"[url=" + config.forum_thread + "]forum[/url]" if dialect == "forum" else ""}``.
Each token is compiled as a Jinja2 expression in a sandboxed environment and
evaluated over a read-only snapshot. Unknown names and fields are errors,
and private attributes are off limits.

The forum post template is a whole Jinja2 template (``{{ }}`` and ``{% %}``)
rendered by the same environment, so it can loop over the mod list.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from jinja2 import StrictUndefined, TemplateError, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from modrel.core.result import Err, Ok, Result

__all__ = ["ExpressionError", "evaluate", "fill_template", "freeze", "render_template"]

_TOKEN_RE = re.compile(r"\{(.*?)\}")


def _join(sep: object, items: object) -> str:
    if not isinstance(items, (list, tuple)):
        raise TypeError("join() expects a list")
    return str(sep).join(str(i) for i in items)


_FUNCTIONS: Mapping[str, Callable[..., object]] = MappingProxyType(
    {
        "len": len,
        "str": str,
        "upper": lambda s: str(s).upper(),
        "lower": lambda s: str(s).lower(),
        "join": _join,
    }
)

_ENV = SandboxedEnvironment(undefined=StrictUndefined, keep_trailing_newline=True)
_ENV.globals.update(_FUNCTIONS)


@dataclass(frozen=True, slots=True)
class ExpressionError:
    """``expression`` is the failing token, or the template name for whole templates."""

    expression: str
    message: str

    def __str__(self) -> str:
        return f"error evaluating {{{self.expression}}}: {self.message}"


def freeze(value: object) -> object:
    """Deep read-only copy of a scope value (dicts become mapping proxies)."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})  # type: ignore[misc]
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)  # type: ignore[misc]
    return value


def _to_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(_to_text(v) for v in value)  # type: ignore[misc]
    return str(value)


def evaluate(expression: str, scope: Mapping[str, object]) -> Result[str, ExpressionError]:
    """Evaluate one expression against ``scope`` and return its text.

    ``None`` renders as an empty string and sequences as a comma-separated
    list.
    """
    try:
        compiled = _ENV.compile_expression(expression.strip(), undefined_to_none=False)
        # str() of an undefined result raises, so this stays inside the try.
        return Ok(_to_text(compiled(**scope)))
    except TemplateSyntaxError as e:
        return Err(ExpressionError(expression, f"syntax error: {e.message}"))
    except (TemplateError, TypeError, ValueError, ZeroDivisionError) as e:
        return Err(ExpressionError(expression, str(e)))


def fill_template(template: str, scope: Mapping[str, object]) -> Result[str, ExpressionError]:
    """Replace every ``{expression}`` token; the first failing token fails the template."""
    out: list[str] = []
    pos = 0
    for m in _TOKEN_RE.finditer(template):
        value = evaluate(m.group(1), scope)
        if isinstance(value, Err):
            return value
        out.append(template[pos : m.start()])
        out.append(value.value)
        pos = m.end()
    out.append(template[pos:])
    return Ok("".join(out))


def render_template(
    template: str, scope: Mapping[str, object], *, name: str = "template"
) -> Result[str, ExpressionError]:
    """Render a full Jinja2 template (loops, conditionals) against ``scope``."""
    try:
        return Ok(_ENV.from_string(template).render(**scope))
    except TemplateSyntaxError as e:
        return Err(ExpressionError(name, f"syntax error on line {e.lineno}: {e.message}"))
    except (TemplateError, TypeError, ValueError, ZeroDivisionError) as e:
        return Err(ExpressionError(name, str(e)))
