"""Write clean SVG output from element definitions and fill matrices."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from qrsvg.engine.sampler import TilePosition

_FILL_COLOR = "#000000"
# Browsers shrink tiny viewBoxes; two CSS px per module keeps codes legible.
_MIN_PX_PER_MODULE = 2


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _attr_str(attrs: dict[str, Any]) -> str:
    return " ".join(f'{k}="{_format_value(v)}"' for k, v in attrs.items())


def _element_lines(elem: dict[str, Any], indent: int) -> list[str]:
    pad = "  " * indent
    tag = elem.get("tag", "path")
    attrs = {k: v for k, v in elem.items() if k not in ("tag", "children")}
    attr_str = _attr_str(attrs)
    opening = f"<{tag} {attr_str}" if attr_str else f"<{tag}"

    children = elem.get("children")
    if not children:
        return [f"{pad}{opening} />"]

    lines = [f"{pad}{opening}>"]
    for child in children:
        lines.extend(_element_lines(child, indent + 1))
    lines.append(f"{pad}</{tag}>")
    return lines


def serialize_svg(
    elements: list[dict[str, Any]],
    canvas_w: float = 24.0,
    canvas_h: float = 24.0,
    title: str = "",
    description: str = "",
    styles: dict[str, str] | None = None,
    root_attrs: dict[str, Any] | None = None,
) -> str:
    """Generate clean SVG markup from element definitions.

    Elements are dicts of attributes plus an optional ``tag`` (default
    ``path``) and ``children`` list of nested element dicts.
    """
    extra = f" {_attr_str(root_attrs)}" if root_attrs else ""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg viewBox="0 0 {_format_value(canvas_w)} {_format_value(canvas_h)}"'
        f' xmlns="http://www.w3.org/2000/svg"{extra}>',
    ]

    if title:
        lines.append(f"  <title>{title}</title>")
    if description:
        lines.append(f"  <desc>{description}</desc>")

    if styles:
        lines.append("  <style>")
        for selector, props in styles.items():
            lines.append(f"    {selector} {{ {props} }}")
        lines.append("  </style>")

    for elem in elements:
        lines.extend(_element_lines(elem, 1))

    lines.append("</svg>")
    return "\n".join(lines)


def render_vector(steps: int, fill_matrix: Iterable[TilePosition], title: str = "") -> str:
    """One unit square per filled module on a ``steps x steps`` canvas.

    Rects keep the order of ``fill_matrix``; the same input always yields
    the same bytes.
    """
    rects = [
        {"tag": "rect", "x": x, "y": y, "width": 1, "height": 1}
        for x, y in fill_matrix
    ]
    group = {"tag": "g", "fill": _FILL_COLOR, "stroke": "none", "children": rects}
    return serialize_svg(
        [group],
        canvas_w=steps,
        canvas_h=steps,
        title=title,
        root_attrs={
            "version": "1.2",
            "baseProfile": "full",
            "shape-rendering": "crispEdges",
            "style": f"min-width: {steps * _MIN_PX_PER_MODULE}px;",
        },
    )
