"""Renderers turning an accumulated Graph into output text."""

from enum import Enum
from typing import Optional, Protocol

from depgraph.export.dot import AttributeBuilder, DotRenderer, render_dot
from depgraph.export.json import JsonRenderer, render_json
from depgraph.export.style import StyleConfiguration
from depgraph.graph.accumulator import Graph


class GraphFormat(str, Enum):
    """Supported output formats."""

    DOT = "dot"
    JSON = "json"


class GraphRenderer(Protocol):
    """Anything that can serialize a finished Graph."""

    def render(self, graph: Graph) -> str: ...


def create_renderer(
    graph_format: GraphFormat,
    style: Optional[StyleConfiguration] = None,
    jsonp: bool = False,
) -> GraphRenderer:
    """Return the renderer for ``graph_format``.

    ``style`` only applies to DOT, ``jsonp`` only to JSON.
    """
    if graph_format is GraphFormat.JSON:
        return JsonRenderer(jsonp=jsonp)
    return DotRenderer(style)


__all__ = [
    "AttributeBuilder",
    "DotRenderer",
    "GraphFormat",
    "GraphRenderer",
    "JsonRenderer",
    "StyleConfiguration",
    "create_renderer",
    "render_dot",
    "render_json",
]
