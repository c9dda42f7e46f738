"""Tests for graph construction."""

import logging

import pytest

from includegraph.graph import (
    build_graph,
    files_from_records,
    top_hubs,
    unresolved_includes,
    unresolved_map,
)
from includegraph.models import Edge, ROOT_GROUP, SourceFile, display_size


def _edge_pairs(graph):
    return {(e.source, e.target) for e in graph.edges}


def test_single_edge_scenario(make_files):
    files = make_files({"a/a.cpp": '#include "b.h"\n', "a/b.h": ""})
    graph = build_graph(files)

    assert set(graph.nodes) == {"a/a.cpp", "a/b.h"}
    assert graph.edges == [Edge("a/a.cpp", "a/b.h")]


def test_layered_graph_edges(layered_files):
    graph = build_graph(layered_files)

    assert _edge_pairs(graph) == {
        ("app/main.cpp", "core/engine.h"),
        ("core/engine.h", "util/log.h"),
        ("core/engine.h", "util/strings.h"),
        ("core/engine.cpp", "core/engine.h"),
        ("util/strings.h", "util/log.h"),
        ("tools/cli.cpp", "core/engine.h"),
    }
    assert sorted(graph.dependents("core/engine.h")) == ["app/main.cpp", "core/engine.cpp", "tools/cli.cpp"]
    assert sorted(graph.dependencies("core/engine.h")) == ["util/log.h", "util/strings.h"]


def test_every_edge_endpoint_is_a_node(layered_files):
    graph = build_graph(layered_files)
    for edge in graph.edges:
        assert edge.source in graph.nodes
        assert edge.target in graph.nodes


def test_build_is_deterministic(layered_files):
    first = build_graph(layered_files)
    second = build_graph(layered_files)

    assert set(first.nodes) == set(second.nodes)
    assert first.edge_set() == second.edge_set()


def test_build_is_independent_of_input_order(layered_files):
    forward = build_graph(layered_files)
    backward = build_graph(list(reversed(layered_files)))
    assert forward.edge_set() == backward.edge_set()


def test_no_self_edges(make_files):
    files = make_files({"self.h": '#include "self.h"\n#include "other.h"\n', "other.h": ""})
    graph = build_graph(files)

    assert all(e.source != e.target for e in graph.edges)
    assert _edge_pairs(graph) == {("self.h", "other.h")}


def test_repeated_includes_collapse(make_files):
    files = make_files({"a.cpp": '#include "b.h"\n#include "b.h"\n#include <b.h>\n', "b.h": ""})
    graph = build_graph(files)
    assert graph.edges == [Edge("a.cpp", "b.h")]
    assert graph.files["a.cpp"].includes == ("b.h", "b.h", "b.h")


def test_unresolved_includes_add_no_edge(layered_files):
    graph = build_graph(layered_files)
    assert graph.dependencies("app/main.cpp") == ["core/engine.h"]
    assert unresolved_includes(graph, "app/main.cpp") == ["vector"]
    assert unresolved_map(graph) == {"app/main.cpp": ["vector"]}
    assert unresolved_includes(graph, "missing.cpp") == []


def test_empty_file_set():
    graph = build_graph([])
    assert graph.nodes == {}
    assert graph.edges == []
    assert graph.to_dict() == {"nodes": [], "links": []}


def test_node_display_attributes():
    files = [
        SourceFile.from_content("main.cpp", "", size=0),
        SourceFile.from_content("src/core/engine.h", "x" * 400),
    ]
    graph = build_graph(files)

    top = graph.nodes["main.cpp"]
    nested = graph.nodes["src/core/engine.h"]
    assert top.group == ROOT_GROUP
    assert nested.group == "src/core"
    assert top.size == 5
    assert nested.size == display_size(400) == 15
    assert nested.name == "engine.h"
    assert not nested.is_broken


def test_churn_is_carried_to_nodes():
    files = [SourceFile.from_content("a.h", "", churn=7), SourceFile.from_content("b.h", "")]
    graph = build_graph(files)
    assert graph.nodes["a.h"].churn == 7
    assert graph.nodes["b.h"].churn is None
    assert graph.nodes["a.h"].to_dict()["churn"] == 7
    assert "churn" not in graph.nodes["b.h"].to_dict()


def test_build_does_not_mutate_inputs(layered_files):
    before = list(layered_files)
    build_graph(layered_files)
    assert layered_files == before


def test_duplicate_paths_keep_last(caplog):
    files = [
        SourceFile.from_content("a.cpp", '#include "old.h"\n'),
        SourceFile.from_content("old.h", ""),
        SourceFile.from_content("new.h", ""),
        SourceFile.from_content("a.cpp", '#include "new.h"\n'),
    ]
    with caplog.at_level(logging.WARNING, logger="includegraph.graph"):
        graph = build_graph(files)

    assert _edge_pairs(graph) == {("a.cpp", "new.h")}
    assert "Duplicate path" in caplog.text


def test_files_from_records():
    files = files_from_records([
        ("src/a.cpp", '#include "b.h"\n', None, 3),
        ("src/b.h", "", 120, None),
    ])
    assert files[0].includes == ("b.h",)
    assert files[0].size == len('#include "b.h"\n')
    assert files[0].churn == 3
    assert files[1].size == 120


def test_files_from_records_without_churn():
    files = files_from_records([("src/a.cpp", "#include <b.h>\n", None)])
    assert files[0].includes == ("b.h",)
    assert files[0].churn is None


def test_files_from_records_rejects_short_records():
    with pytest.raises(ValueError):
        files_from_records([("src/a.cpp", "")])


def test_top_hubs(layered_files):
    graph = build_graph(layered_files)
    hubs = top_hubs(graph, limit=2)
    assert hubs[0] == ("core/engine.h", 3)
    assert hubs[1] == ("util/log.h", 2)


def test_to_dict_shape(make_files):
    graph = build_graph(make_files({"a/a.cpp": '#include "b.h"\n', "a/b.h": ""}))
    payload = graph.to_dict()
    assert payload["links"] == [{"source": "a/a.cpp", "target": "a/b.h"}]
    assert {n["id"] for n in payload["nodes"]} == {"a/a.cpp", "a/b.h"}
    assert all("isBroken" not in n for n in payload["nodes"])
