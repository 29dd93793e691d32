"""
Top-to-bottom layered layout for LLM-generated flowcharts.

The layering itself (cycle breaking, rank assignment, crossing reduction and
coordinate assignment) is igraph's Sugiyama layout. This module only feeds it
gaps derived from the per-type node footprints, places weakly connected
components side by side, and stores each node's top-left corner rather than
its centre.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

import igraph as ig

from lexical.models import FlowchartGraph


@dataclass(frozen=True)
class NodeSize:
    width: float
    height: float


NODE_SIZES: Dict[str, NodeSize] = {
    "start": NodeSize(130, 60),
    "end": NodeSize(130, 60),
    "process": NodeSize(160, 60),
    "decision": NodeSize(140, 100),
    "input": NodeSize(160, 70),
    "output": NodeSize(160, 70),
}
DEFAULT_NODE_SIZE = NodeSize(160, 60)


@dataclass(frozen=True)
class LayoutSpacing:
    node_sep: float = 80
    rank_sep: float = 100
    margin_x: float = 20
    margin_y: float = 20


DEFAULT_SPACING = LayoutSpacing()

Edge = Tuple[int, int]


def node_size(node_type: str) -> NodeSize:
    return NODE_SIZES.get(node_type, DEFAULT_NODE_SIZE)


def _index_graph(graph: FlowchartGraph) -> Tuple[List[str], List[NodeSize], Set[Edge]]:
    """Vertex ids follow the model's node order; duplicate ids keep the first node."""
    ids: List[str] = []
    sizes: List[NodeSize] = []
    index: Dict[str, int] = {}
    for node in graph.nodes:
        if node.id not in index:
            index[node.id] = len(ids)
            ids.append(node.id)
            sizes.append(node_size(node.type))

    edges: Set[Edge] = set()
    for edge in graph.edges:
        # Self-loops and dangling edges carry no ranking information.
        if edge.source == edge.target or edge.source not in index or edge.target not in index:
            continue
        edges.add((index[edge.source], index[edge.target]))
    return ids, sizes, edges


def _sugiyama_centres(component: ig.Graph, hgap: float, vgap: float) -> List[Tuple[float, float]]:
    layout = component.layout_sugiyama(hgap=hgap, vgap=vgap)
    # Older igraph releases append rows for the dummy vertices of long edges.
    return [(float(x), float(y)) for x, y in layout.coords[: component.vcount()]]


def layout_flowchart(graph: FlowchartGraph, spacing: LayoutSpacing = DEFAULT_SPACING) -> FlowchartGraph:
    """Return a copy of ``graph`` with every node's top-left ``x``/``y`` filled in."""
    ids, sizes, edges = _index_graph(graph)
    if not ids:
        return graph.model_copy(deep=True)

    # Uniform cells big enough for the largest footprint keep nodes from overlapping.
    tallest = max(s.height for s in sizes)
    hgap = max(s.width for s in sizes) + spacing.node_sep
    vgap = tallest + spacing.rank_sep

    full = ig.Graph(n=len(ids), edges=sorted(edges), directed=True)
    components = sorted(
        (sorted(c) for c in full.connected_components(mode="weak")),
        key=min,
    )

    centres: Dict[str, Tuple[float, float]] = {}
    cursor = 0.0
    for members in components:
        placed = _sugiyama_centres(full.induced_subgraph(members), hgap, vgap)
        left = min(cx - sizes[v].width / 2 for v, (cx, _) in zip(members, placed))
        right = max(cx + sizes[v].width / 2 for v, (cx, _) in zip(members, placed))
        top = min(cy for _, cy in placed)
        shift = cursor - left
        for v, (cx, cy) in zip(members, placed):
            centres[ids[v]] = (cx + shift, cy - top + tallest / 2)
        cursor += (right - left) + spacing.node_sep

    nodes = []
    for node in graph.nodes:
        cx, cy = centres[node.id]
        size = node_size(node.type)
        nodes.append(node.model_copy(update={
            "x": cx - size.width / 2 + spacing.margin_x,
            "y": cy - size.height / 2 + spacing.margin_y,
        }))
    return graph.model_copy(update={"nodes": nodes, "edges": [e.model_copy() for e in graph.edges]})
