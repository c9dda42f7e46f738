"""Graph export helpers for JSON, DOT and simple standalone HTML outputs."""

from __future__ import annotations

import html
import json
from pathlib import Path
from typing import Any, Dict, List

from .churn import heat_color, heat_level
from .errors import IncludeGraphError
from .models import DependencyGraph, Direction
from .reachability import reachability


def graph_payload(
    graph: DependencyGraph,
    focus: str = "",
    depth: int = 1,
    direction: Direction = Direction.ALL,
) -> Dict[str, Any]:
    """Nodes and links ready for a layout collaborator, optionally focused.

    *focus* must be an exact node id; callers resolve user input first.
    """
    selected = _focused_subgraph(graph, focus, depth, direction)
    nodes: List[Dict[str, Any]] = []
    for node_id in selected["nodes"]:
        node = graph.nodes[node_id]
        payload = node.to_dict()
        payload["heat"] = heat_level(node.churn)
        nodes.append(payload)
    links = [{"source": e.source, "target": e.target} for e in selected["edges"]]
    return {"nodes": nodes, "links": links}


def export_json(graph: DependencyGraph, output_file: Path, focus: str = "", depth: int = 1) -> None:
    payload = graph_payload(graph, focus, depth)
    output_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def export_dot(graph: DependencyGraph, output_file: Path, focus: str = "", depth: int = 1) -> None:
    selected = _focused_subgraph(graph, focus, depth, Direction.ALL)

    lines = ["digraph IncludeGraph {"]
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box, style=filled, fontname=monospace];")

    for node_id in selected["nodes"]:
        node = graph.nodes[node_id]
        attrs = [
            f'label="{_esc(node.name)}"',
            f'tooltip="{_esc(node.path)}"',
            f'fillcolor="{heat_color(node.churn)}"',
            'fontcolor="white"',
        ]
        if node.is_broken:
            attrs.append('color="red"')
            attrs.append("penwidth=2")
        lines.append(f'  "{_esc(node_id)}" [{", ".join(attrs)}];')

    for edge in selected["edges"]:
        lines.append(f'  "{_esc(edge.source)}" -> "{_esc(edge.target)}";')

    lines.append("}")
    output_file.write_text("\n".join(lines), encoding="utf-8")


def export_html(graph: DependencyGraph, output_file: Path, focus: str = "", depth: int = 1) -> None:
    """Write a self-contained HTML report: one table row per file, graph JSON embedded."""
    payload = graph_payload(graph, focus, depth)
    output_file.write_text(_render_html(payload), encoding="utf-8")


def _render_html(payload: Dict[str, Any]) -> str:
    includes: Dict[str, List[str]] = {}
    included_by: Dict[str, int] = {}
    for link in payload["links"]:
        includes.setdefault(link["source"], []).append(link["target"])
        included_by[link["target"]] = included_by.get(link["target"], 0) + 1

    rows = []
    for node in sorted(payload["nodes"], key=lambda n: n["path"]):
        path = node["path"]
        targets = "<br>".join(html.escape(t) for t in includes.get(path, []))
        css = ' class="broken"' if node.get("isBroken") else ""
        rows.append(
            f"      <tr{css}>"
            f"<td>{html.escape(path)}</td>"
            f"<td>{html.escape(node['group'])}</td>"
            f'<td class="num"><span class="heat" style="background:{heat_color(node.get("churn"))}">'
            f"{node['heat']}</span></td>"
            f'<td class="num">{included_by.get(path, 0)}</td>'
            f"<td>{targets}</td></tr>"
        )

    data = json.dumps(payload).replace("</", "<\\/")
    body = "\n".join(rows)
    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>IncludeGraph Export</title>
  <style>
    body {{ font-family: ui-monospace, Menlo, monospace; background: #18181b; color: #e4e4e7; margin: 24px; }}
    table {{ border-collapse: collapse; width: 100%; }}
    th, td {{ border-bottom: 1px solid #3f3f46; padding: 4px 8px; text-align: left; vertical-align: top; }}
    td.num {{ text-align: right; }}
    .heat {{ display: inline-block; min-width: 1.5em; text-align: center; border-radius: 4px; }}
    tr.broken td:first-child {{ color: #ef4444; font-weight: bold; }}
  </style>
</head>
<body>
  <h1>IncludeGraph Export</h1>
  <p>{len(payload["nodes"])} files, {len(payload["links"])} includes</p>
  <table>
    <thead>
      <tr><th>File</th><th>Group</th><th>Heat</th><th>Included by</th><th>Includes</th></tr>
    </thead>
    <tbody>
{body}
    </tbody>
  </table>
  <script type="application/json" id="graph-data">{data}</script>
</body>
</html>
"""


def _focused_subgraph(
    graph: DependencyGraph,
    focus: str,
    depth: int,
    direction: Direction,
) -> Dict[str, List]:
    if not focus:
        return {"nodes": list(graph.nodes.keys()), "edges": list(graph.edges)}
    if focus not in graph.nodes:
        raise IncludeGraphError(f"Focus file '{focus}' is not part of the graph")

    result = reachability(graph, focus, direction, depth)
    node_subset = [p for p in graph.nodes if p in result.nodes]
    edge_subset = [e for e in graph.edges if e in result.edges]
    return {"nodes": node_subset, "edges": edge_subset}


def _esc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
