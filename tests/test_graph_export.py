"""Tests for JSON, DOT and HTML graph export."""

import json
from pathlib import Path

import pytest

from includegraph.errors import IncludeGraphError
from includegraph.graph import build_graph
from includegraph.graph_export import export_dot, export_html, export_json, graph_payload
from includegraph.models import SourceFile
from includegraph.sandbox import simulate_move


def test_payload_contains_all_nodes_and_links(layered_files):
    graph = build_graph(layered_files)
    payload = graph_payload(graph)

    assert len(payload["nodes"]) == len(graph.nodes)
    assert len(payload["links"]) == len(graph.edges)
    assert all("heat" in n for n in payload["nodes"])


def test_focus_limits_to_neighbourhood(layered_files):
    graph = build_graph(layered_files)
    payload = graph_payload(graph, focus="util/strings.h", depth=1)

    ids = {n["id"] for n in payload["nodes"]}
    assert ids == {"util/strings.h", "util/log.h", "core/engine.h"}
    assert {"source": "util/strings.h", "target": "util/log.h"} in payload["links"]


def test_focus_requires_exact_node_id(make_files):
    files = make_files({
        "lib/ab.h": "",
        "lib/b.h": "",
        "src/x.cpp": '#include "../lib/b.h"\n',
    })
    graph = build_graph(files)

    payload = graph_payload(graph, focus="lib/b.h", depth=1)
    assert {n["id"] for n in payload["nodes"]} == {"lib/b.h", "src/x.cpp"}

    with pytest.raises(IncludeGraphError):
        graph_payload(graph, focus="b.h")


def test_unknown_focus_is_rejected(layered_files):
    graph = build_graph(layered_files)
    with pytest.raises(IncludeGraphError):
        graph_payload(graph, focus="nothing.h")


def test_export_json(layered_files, temp_dir: Path):
    graph = build_graph(layered_files)
    out = temp_dir / "graph.json"
    export_json(graph, out)

    data = json.loads(out.read_text(encoding="utf-8"))
    assert {"source": "core/engine.cpp", "target": "core/engine.h"} in data["links"]


def test_export_dot_marks_broken_nodes(make_files, temp_dir: Path):
    files = make_files({"a/a.cpp": '#include "b.h"\n', "a/b.h": ""})
    graph = simulate_move(files, "a/b.h", "lib/b.h")
    out = temp_dir / "graph.dot"
    export_dot(graph, out)

    text = out.read_text(encoding="utf-8")
    assert text.startswith("digraph IncludeGraph {")
    assert '"a/a.cpp" [label="a.cpp"' in text
    assert 'color="red"' in text
    assert '"a/a.cpp" -> "lib/b.h";' in text


def test_export_dot_heat_colours(temp_dir: Path):
    graph = build_graph([
        SourceFile.from_content("hot.h", "", churn=30),
        SourceFile.from_content("cold.h", "", churn=0),
    ])
    out = temp_dir / "heat.dot"
    export_dot(graph, out)

    text = out.read_text(encoding="utf-8")
    assert 'fillcolor="#ef4444"' in text
    assert 'fillcolor="#27272a"' in text


def test_export_html(layered_files, temp_dir: Path):
    graph = build_graph(layered_files)
    out = temp_dir / "graph.html"
    export_html(graph, out)

    text = out.read_text(encoding="utf-8")
    assert "<title>IncludeGraph Export</title>" in text
    assert "core/engine.h" in text


def test_export_dot_escapes_backslashes_and_quotes(temp_dir: Path):
    graph = build_graph([SourceFile.from_content('odd\\"name.h', "")])
    out = temp_dir / "odd.dot"
    export_dot(graph, out)

    assert '"odd\\\\\\"name.h" [label=' in out.read_text(encoding="utf-8")


def test_export_html_escapes_markup(temp_dir: Path):
    graph = build_graph([
        SourceFile.from_content("a<b>.h", ""),
        SourceFile.from_content("main.cpp", '#include "a<b>.h"\n'),
    ])
    out = temp_dir / "graph.html"
    export_html(graph, out)

    text = out.read_text(encoding="utf-8")
    assert "<td>a&lt;b&gt;.h</td>" in text
    assert "<b>" not in text.split('id="graph-data"')[0]
