"""Test configuration and shared fixtures."""

import pytest

from graphbase import new_graph


LOOK_FEEL_GB = (
    "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,2V,1A)\n"
    "\"anonymous\",2,1\n"
    "* Vertices\n"
    "\"look\",A0\n"
    "\"feel\",0\n"
    "* Arcs\n"
    "V1,0,1\n"
    "* Checksum 2372646\n"
)


@pytest.fixture
def look_feel_graph():
    """The single-arc graph look -> feel."""
    graph = new_graph(3)
    graph.add_arc("look", "feel", 1)
    return graph


@pytest.fixture
def look_feel_text():
    return LOOK_FEEL_GB


@pytest.fixture
def branching_graph():
    """Two arcs out of "a" with an arc from "c" added between them."""
    graph = new_graph(4)
    graph.add_arc("a", "b", 5)
    graph.add_arc("c", "d", 7)
    graph.add_arc("a", "c", 2)
    return graph


@pytest.fixture
def utility_graph():
    """A graph using every supported utility type."""
    graph = new_graph(2, "utilities")
    graph.add_arc("x", "y", 3)
    graph.add_arc("y", "x", -4)

    graph.set_util_type("u", "I")
    graph.set_util_type("v", "S")
    graph.set_util_type("w", "V")
    graph.set_util_type("a", "A")
    graph.set_util_type("b", "I")
    graph.set_util_type("uu", "S")

    graph.set_vertex_util("x", "u", 42)
    graph.set_vertex_util("x", "v", "hello, world")
    graph.set_vertex_util("x", "w", 1)
    graph.set_vertex_util("y", "w", True)
    graph.set_arc_util(0, "a", 1)
    graph.set_arc_util(1, "b", -7)
    graph.set_graph_util("uu", "words")
    return graph
