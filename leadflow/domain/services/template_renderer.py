"""Mini-template renderer for tenant-authored email templates.

Supported constructs, applied in this order:

1. Styling variables (``{{primaryColor}}``, ``{{fontFamily}}``,
   ``{{headerBgColor}}``, ``{{footerBgColor}}``) with hard-coded fallbacks.
   These take precedence over bag and loop variables of the same name.
2. ``{{#each path}}...{{/each}}`` repeated blocks. Mapping elements expose
   their fields unqualified, plus ``{{this}}`` and ``{{@index}}``.
3. ``{{#if name}}...{{else}}...{{/if}}`` conditionals.
4. ``{{name}}`` substitution; absent or None renders as an empty string.

Templates are parsed into a small tree before evaluation, so loop bodies are
expanded with their own scope and substituted values are never re-scanned
for placeholders. Anything inside ``{{ }}`` that is not one of the constructs
above, and block tags without a partner, are left in the output verbatim.
"""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from leadflow.settings import settings

logger = logging.getLogger(__name__)

STYLING_KEYS = ("primaryColor", "fontFamily", "headerBgColor", "footerBgColor")

_TAG_RE = re.compile(r"\{\{([^{}]*)\}\}")
_PATH_RE = re.compile(r"^(@index|this|[A-Za-z_][\w-]*)(\.[\w-]+)*$")

_MISSING = object()


@dataclass
class RenderedEmail:
    """Rendered subject, HTML and text bodies of one email."""

    subject: str
    html: str
    text: str


@dataclass
class _Block:
    kind: str
    arg: str = ""
    raw: str = ""
    children: list = field(default_factory=list)
    else_children: list | None = None
    else_raw: str = ""

    @property
    def target(self) -> list:
        return self.else_children if self.else_children is not None else self.children


@dataclass
class _Var:
    path: str


@dataclass
class _Style:
    key: str


def _flatten(block: _Block) -> list:
    """Nodes of an unclosed block, with its tags restored as literal text."""
    nodes: list = [block.raw, *block.children]
    if block.else_children is not None:
        nodes.append(block.else_raw)
        nodes.extend(block.else_children)
    return nodes


def _parse(source: str) -> list:
    root = _Block("root")
    stack = [root]
    position = 0

    for match in _TAG_RE.finditer(source):
        if match.start() > position:
            stack[-1].target.append(source[position:match.start()])
        position = match.end()

        raw = match.group(0)
        inner = match.group(1).strip()
        head, _, arg = inner.partition(" ")
        arg = arg.strip()

        if head in ("#each", "#if") and _PATH_RE.match(arg):
            stack.append(_Block(head[1:], arg=arg, raw=raw))
        elif inner in ("/each", "/if") and stack[-1].kind == inner[1:]:
            block = stack.pop()
            stack[-1].target.append(block)
        elif inner == "else" and stack[-1].kind == "if" and stack[-1].else_children is None:
            stack[-1].else_children = []
            stack[-1].else_raw = raw
        elif inner in STYLING_KEYS:
            stack[-1].target.append(_Style(inner))
        elif _PATH_RE.match(inner):
            stack[-1].target.append(_Var(inner))
        else:
            stack[-1].target.append(raw)

    if position < len(source):
        stack[-1].target.append(source[position:])

    # Unclosed blocks fall back to literal text
    while len(stack) > 1:
        block = stack.pop()
        logger.debug(f"Unclosed template block left as text: {block.raw}")
        stack[-1].target.extend(_flatten(block))

    return root.children


def lookup(context: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path against a render context, or ``_MISSING``."""
    current: Any = context
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def is_truthy(value: Any) -> bool:
    """Present and not None, empty, False or zero."""
    if value is _MISSING or value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return bool(value)


def to_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(to_text(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, default=str)
    return str(value)


def _iterate(value: Any) -> list:
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _evaluate(nodes: list, context: Mapping[str, Any], theme: Mapping[str, str]) -> str:
    out: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            out.append(node)
        elif isinstance(node, _Style):
            out.append(theme[node.key])
        elif isinstance(node, _Var):
            out.append(to_text(lookup(context, node.path)))
        elif node.kind == "each":
            for index, item in enumerate(_iterate(lookup(context, node.arg))):
                scope = dict(context)
                if isinstance(item, Mapping):
                    scope.update(item)
                scope["this"] = item
                scope["@index"] = index
                out.append(_evaluate(node.children, scope, theme))
        elif node.kind == "if":
            if is_truthy(lookup(context, node.arg)):
                out.append(_evaluate(node.children, context, theme))
            elif node.else_children is not None:
                out.append(_evaluate(node.else_children, context, theme))
    return "".join(out)


def resolve_styling(
    styling: Mapping[str, Any] | None, context: Mapping[str, Any] | None = None
) -> dict[str, str]:
    """Theme values from template styling, then the context, then fallbacks."""
    styling = styling or {}
    context = context or {}

    def pick(key: str) -> str | None:
        for source in (styling, context):
            value = source.get(key)
            if value:
                return str(value)
        return None

    primary = pick("primaryColor") or settings.default_primary_color
    return {
        "primaryColor": primary,
        "fontFamily": pick("fontFamily") or settings.default_font_family,
        "headerBgColor": pick("headerBgColor") or primary,
        "footerBgColor": pick("footerBgColor") or settings.default_footer_bg_color,
    }


def render_string(
    source: str | None,
    context: Mapping[str, Any],
    styling: Mapping[str, Any] | None = None,
) -> str:
    """Render one template string against a variable bag."""
    if not source:
        return ""
    return _evaluate(_parse(source), context, resolve_styling(styling, context))


def render_email(template: Any, bag: Mapping[str, Any]) -> RenderedEmail:
    """Render subject, HTML and text of a template from the same bag.

    Args:
        template: Object with ``subject_template``, ``html_template``,
            ``text_template`` and ``styling`` attributes
        bag: Variable bag produced by field extraction

    Returns:
        RenderedEmail with the three rendered bodies
    """
    styling = getattr(template, "styling", None)
    # Subject is a single header line
    return RenderedEmail(
        subject=" ".join(render_string(template.subject_template, bag, styling).split()),
        html=render_string(template.html_template, bag, styling),
        text=render_string(getattr(template, "text_template", None), bag, styling),
    )
