"""Tests for the ASCII tree, DOT/Mermaid exporters, and Graphviz invocation."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from depviz.analysis.ascii_tree import REPEAT_MARKER, render_ascii_tree
from depviz.analysis.dependency_graph import build_dependency_graph
from depviz.analysis.graph_models import PackageId
from depviz.exporter import export_graph, image_filename
from depviz.exporter.dot_exporter import DotExporter, dot_node_id
from depviz.exporter.graphviz_runner import GraphvizRunner
from depviz.exporter.mermaid_exporter import MermaidExporter, mermaid_node_id
from depviz.sources.base import DependencySource


class TableSource(DependencySource):
    def __init__(self, table):
        self.table = table

    def direct_dependencies(self, package):
        return [PackageId(*entry.split(":")) for entry in self.table.get(package.name, [])]


def _graph(table, root="App"):
    return build_dependency_graph(root, "1.0", TableSource(table))


DIAMOND = {
    "App": ["Left:1.0", "Right:1.0"],
    "Left": ["Core.Json:2.0"],
    "Right": ["Core.Json:2.0"],
}


# ── ASCII tree ────────────────────────────────────────────────

class TestAsciiTree:
    def test_chain(self):
        root = _graph({"App": ["Lib:2.0"], "Lib": ["Util:1.0"]})
        assert render_ascii_tree(root) == (
            "App (1.0)\n"
            "└── Lib (2.0)\n"
            "    └── Util (1.0)"
        )

    def test_repeat_marked_not_expanded(self):
        root = _graph({**DIAMOND, "Core.Json": ["Deep:1.0"]})
        lines = render_ascii_tree(root).splitlines()
        assert lines == [
            "App (1.0)",
            "├── Left (1.0)",
            "│   └── Core.Json (2.0)",
            "│       └── Deep (1.0)",
            "└── Right (1.0)",
            f"    └── Core.Json (2.0){REPEAT_MARKER}",
        ]

    def test_cycle_terminates(self):
        root = _graph({"App": ["Lib:1.0"], "Lib": ["App:1.0"]})
        lines = render_ascii_tree(root).splitlines()
        assert lines == [
            "App (1.0)",
            "└── Lib (1.0)",
            f"    └── App (1.0){REPEAT_MARKER}",
        ]

    def test_lone_root(self):
        assert render_ascii_tree(_graph({})) == "App (1.0)"


# ── DOT ───────────────────────────────────────────────────────

class TestDotExporter:
    def test_node_ids_are_safe_and_stable(self):
        root = _graph(DIAMOND)
        core = root.dependencies[0].dependencies[0]
        assert dot_node_id(core) == "Core.Json@2.0"
        assert dot_node_id(core) == dot_node_id(_graph(DIAMOND).dependencies[0].dependencies[0])

    def test_each_node_and_edge_once(self):
        root = _graph({**DIAMOND, "App": ["Left:1.0", "Right:1.0", "Left:1.0"]})
        dot = DotExporter().render(root)

        assert dot.startswith("digraph DependencyGraph {")
        assert dot.rstrip().endswith("}")
        assert dot.count('[label="Core.Json\\n(2.0)"]') == 1
        assert dot.count('"App@1.0" -> "Left@1.0";') == 1
        assert '"Left@1.0" -> "Core.Json@2.0";' in dot
        assert '"Right@1.0" -> "Core.Json@2.0";' in dot
        assert dot.count(" -> ") == 4

    def test_output_path(self):
        assert DotExporter().output_path("out/graph.png") == Path("out/graph.png.dot")

    def test_cycle(self):
        root = _graph({"App": ["Lib:1.0"], "Lib": ["App:1.0"]})
        dot = DotExporter().render(root)
        assert '"Lib@1.0" -> "App@1.0";' in dot

    def test_punctuation_variants_stay_distinct(self):
        root = _graph({"App": ["Foo.Bar:1.0", "Foo-Bar:1.0"]})
        dot = DotExporter().render(root)

        node_lines = [l for l in dot.splitlines() if "[label=" in l]
        assert len(node_lines) == 3
        assert '"App@1.0" -> "Foo.Bar@1.0";' in dot
        assert '"App@1.0" -> "Foo-Bar@1.0";' in dot

    def test_quotes_in_names_escaped(self):
        node = _graph({"App": ['Odd"Name:1.0']}).dependencies[0]
        assert dot_node_id(node) == 'Odd\\"Name@1.0'


# ── Mermaid ───────────────────────────────────────────────────

class TestMermaidExporter:
    def test_render(self):
        root = _graph(DIAMOND)
        text = MermaidExporter().render(root)
        lines = text.splitlines()

        assert lines[0] == "graph TD"
        core_id = mermaid_node_id(root.dependencies[0].dependencies[0])
        assert sum(1 for l in lines if l.strip().startswith(f"{core_id}[")) == 1
        assert sum(1 for l in lines if "-->" in l) == 4
        assert f"    {mermaid_node_id(root)} --> {mermaid_node_id(root.dependencies[0])}" in lines

    def test_ids_stable_across_builds(self):
        a = _graph(DIAMOND)
        b = _graph(DIAMOND)
        assert MermaidExporter().render(a) == MermaidExporter().render(b)
        assert mermaid_node_id(a).startswith("N")

    def test_output_path(self):
        assert MermaidExporter().output_path("graph.png") == Path("graph.mermaid")
        assert MermaidExporter().output_path("graph") == Path("graph.mermaid")


# ── Graphviz + export_graph ───────────────────────────────────

class TestGraphvizRunner:
    def test_image_filename(self):
        assert image_filename("graph.svg") == "graph.svg"
        assert image_filename("graph.PNG") == "graph.PNG"
        assert image_filename("graph") == "graph.png"
        assert image_filename("graph.jpg") == "graph.jpg.png"

    def test_success(self, tmp_path):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
        with patch("depviz.exporter.graphviz_runner.subprocess.run", return_value=completed) as run:
            ok = GraphvizRunner().render_image(tmp_path / "g.svg.dot", tmp_path / "g.svg")
        assert ok
        cmd = run.call_args.args[0]
        assert cmd[:2] == ["dot", "-Tsvg"]
        assert cmd[-2:] == ["-o", str(tmp_path / "g.svg")]

    def test_missing_tool(self, tmp_path):
        with patch("depviz.exporter.graphviz_runner.subprocess.run", side_effect=FileNotFoundError):
            assert not GraphvizRunner().render_image(tmp_path / "g.dot", tmp_path / "g.png")

    def test_nonzero_exit(self, tmp_path):
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="syntax error")
        with patch("depviz.exporter.graphviz_runner.subprocess.run", return_value=completed):
            assert not GraphvizRunner().render_image(tmp_path / "g.dot", tmp_path / "g.png")

    def test_timeout(self, tmp_path):
        err = subprocess.TimeoutExpired(cmd="dot", timeout=1)
        with patch("depviz.exporter.graphviz_runner.subprocess.run", side_effect=err):
            assert not GraphvizRunner(timeout=1).render_image(tmp_path / "g.dot", tmp_path / "g.png")


class TestExportGraph:
    def test_writes_all_files(self, tmp_path):
        runner = MagicMock()
        runner.render_image.return_value = True
        result = export_graph(_graph(DIAMOND), str(tmp_path / "deps"), runner=runner)

        assert result.dot_path == tmp_path / "deps.png.dot"
        assert result.mermaid_path == tmp_path / "deps.mermaid"
        assert result.image_path == tmp_path / "deps.png"
        assert result.dot_path.read_text(encoding="utf-8").startswith("digraph")
        assert result.mermaid_path.read_text(encoding="utf-8").startswith("graph TD")
        assert result.errors == []
        runner.render_image.assert_called_once_with(result.dot_path, tmp_path / "deps.png")

    def test_render_failure_reported_not_raised(self, tmp_path):
        runner = MagicMock()
        runner.render_image.return_value = False
        result = export_graph(_graph(DIAMOND), str(tmp_path / "deps.svg"), runner=runner)

        assert result.image_path is None
        assert result.dot_path.exists()
        assert result.mermaid_path.exists()
        assert len(result.errors) == 1

    def test_unwritable_dot_skips_image_but_writes_mermaid(self, tmp_path):
        runner = MagicMock()
        with patch.object(DotExporter, "export", side_effect=PermissionError("read-only")):
            result = export_graph(_graph(DIAMOND), str(tmp_path / "deps.png"), runner=runner)

        assert result.dot_path is None
        assert result.mermaid_path.exists()
        runner.render_image.assert_not_called()
        assert any(e.startswith("DOT:") for e in result.errors)

    def test_mermaid_name_cut_at_last_dot(self, tmp_path):
        runner = MagicMock()
        runner.render_image.return_value = True
        result = export_graph(_graph(DIAMOND), str(tmp_path / "my.graph"), runner=runner)

        assert result.dot_path == tmp_path / "my.graph.png.dot"
        assert result.mermaid_path == tmp_path / "my.mermaid"
        assert result.image_path == tmp_path / "my.graph.png"
