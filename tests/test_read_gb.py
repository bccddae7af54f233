import io
from collections import Counter

import pytest

from graphbase import (
    GBChecksumError,
    GBFormatError,
    dumps_gb,
    loads_gb,
    new_graph,
    read_gb,
    write_gb,
)
from graphbase.core.graph import MAX_LENGTH, MIN_LENGTH


def _gb(*aLine):
    return "\n".join(aLine) + "\n"


def test_read_look_feel(look_feel_text):
    graph = loads_gb(look_feel_text)

    assert graph.id == "anonymous"
    assert graph.n == 2
    assert graph.m == 1
    assert graph.get_vertex_id("look") == 0
    assert graph.get_vertex_id("feel") == 1
    assert graph.arc_triples() == [(0, 1, 1)]


def test_round_trip_preserves_vertices_and_arcs(branching_graph):
    graph = loads_gb(dumps_gb(branching_graph))

    assert graph.n == branching_graph.n
    assert [v.sName for v in graph.get_vertices()] == ["a", "b", "c", "d"]
    assert Counter(graph.arc_triples()) == Counter(branching_graph.arc_triples())


def test_round_trip_of_empty_graph():
    graph = loads_gb(dumps_gb(new_graph(5, "empty")))

    assert graph.id == "empty"
    assert graph.n == 0
    assert graph.m == 0


def test_round_trip_of_repeated_arcs_and_self_loops():
    original = new_graph(3)
    original.add_arc("a", "a", 1)
    original.add_arc("a", "b", 2)
    original.add_arc("a", "b", 2)
    original.add_vertex("isolated")

    graph = loads_gb(dumps_gb(original))

    assert graph.n == 3
    assert graph.get_vertex_id("isolated") == 2
    assert Counter(graph.arc_triples()) == Counter(original.arc_triples())


def test_round_trip_of_utility_fields(utility_graph):
    graph = loads_gb(dumps_gb(utility_graph))

    assert graph.util_types == "ISVZZZAISZZZZZ"
    assert graph.get_graph_util("uu") == "words"
    assert graph.get_vertex_util("x", "u") == 42
    assert graph.get_vertex_util("x", "v") == "hello, world"
    assert graph.get_vertex_util("x", "w") == 1
    assert graph.get_vertex_util("y", "w") is True
    assert graph.get_vertex_util("y", "u") == 0
    assert graph.get_vertex_util("y", "v") == ""
    assert graph.get_arc_util(0, "a") == 1
    assert graph.get_arc_util(1, "a") is None
    assert graph.get_arc_util(1, "b") == -7


def test_round_trip_of_long_and_awkward_names():
    original = new_graph(3)
    original.add_arc("x" * 300, "comma, separated", 12)
    original.add_arc("", "x" * 300, -1)

    graph = loads_gb(dumps_gb(original))

    assert [v.sName for v in graph.get_vertices()] == ["x" * 300, "comma, separated", ""]
    assert Counter(graph.arc_triples()) == Counter(original.arc_triples())


@pytest.mark.parametrize("sBreak", ["\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029"])
def test_round_trip_of_names_with_unicode_line_breaks(sBreak):
    original = new_graph(2)
    original.add_arc(f"form{sBreak}feed", "b", 1)

    graph = loads_gb(dumps_gb(original))

    assert [v.sName for v in graph.get_vertices()] == [f"form{sBreak}feed", "b"]
    assert graph.arc_triples() == [(0, 1, 1)]


def test_round_trip_of_extreme_lengths():
    original = new_graph(2)
    original.add_arc("a", "b", MAX_LENGTH)
    original.add_arc("a", "b", MIN_LENGTH)

    graph = loads_gb(dumps_gb(original))

    assert graph.arc_triples() == [(0, 1, MAX_LENGTH), (0, 1, MIN_LENGTH)]


def test_crlf_line_endings_are_accepted(look_feel_text):
    graph = loads_gb(look_feel_text.replace("\n", "\r\n"))

    assert graph.arc_triples() == [(0, 1, 1)]


def test_read_from_path_and_stream(look_feel_graph, tmp_path):
    path = tmp_path / "look.gb"
    write_gb(look_feel_graph, path)

    from_path = read_gb(path)
    with open(path, encoding="utf-8") as stream:
        from_stream = read_gb(stream)

    assert from_path.arc_triples() == from_stream.arc_triples() == [(0, 1, 1)]


def test_checksum_mismatch_is_detected(look_feel_text):
    sText = look_feel_text.replace('"look"', '"lock"')

    with pytest.raises(GBChecksumError) as excinfo:
        loads_gb(sText)

    assert excinfo.value.lineno == 8
    assert loads_gb(sText, iFlag_verify_checksum=0).get_vertex_id("lock") == 0


def test_missing_checksum_line(look_feel_text):
    sText = look_feel_text.replace("* Checksum 2372646\n", "")

    with pytest.raises(GBFormatError, match="missing checksum line"):
        loads_gb(sText)

    assert loads_gb(sText, iFlag_verify_checksum=0).n == 2


def test_errors_carry_file_and_line():
    with pytest.raises(GBFormatError) as excinfo:
        loads_gb("not a graph\n", sFilename="bad.gb")

    assert excinfo.value.filename == "bad.gb"
    assert excinfo.value.lineno == 1
    assert str(excinfo.value).startswith("bad.gb:1 ")


def test_empty_text_is_rejected():
    with pytest.raises(GBFormatError, match="empty file"):
        loads_gb("")


def test_graph_util_type_is_unsupported():
    sText = _gb(
        "* GraphBase graph (util_types GZZZZZZZZZZZZZ,0V,0A)",
        "\"g\",0,0",
        "* Vertices",
        "* Arcs",
    )

    with pytest.raises(GBFormatError, match="'G' util type"):
        loads_gb(sText, iFlag_verify_checksum=0)


def test_unknown_util_type_letter():
    sText = _gb(
        "* GraphBase graph (util_types QZZZZZZZZZZZZZ,0V,0A)",
        "\"g\",0,0",
        "* Vertices",
        "* Arcs",
    )

    with pytest.raises(GBFormatError, match="Unrecognized util type: Q"):
        loads_gb(sText, iFlag_verify_checksum=0)


def test_vertex_count_must_match_header():
    sText = _gb(
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,3V,0A)",
        "\"g\",3,0",
        "* Vertices",
        "\"a\",0",
        "* Arcs",
    )

    with pytest.raises(GBFormatError, match="expected 3 vertices, found 1"):
        loads_gb(sText, iFlag_verify_checksum=0)


def test_graph_line_must_match_header():
    sText = _gb(
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,1V,0A)",
        "\"g\",2,0",
        "* Vertices",
        "\"a\",0",
        "* Arcs",
    )

    with pytest.raises(GBFormatError) as excinfo:
        loads_gb(sText, iFlag_verify_checksum=0)

    assert excinfo.value.lineno == 2


def test_duplicate_vertex_names_are_rejected():
    sText = _gb(
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,2V,0A)",
        "\"g\",2,0",
        "* Vertices",
        "\"a\",0",
        "\"a\",0",
        "* Arcs",
    )

    with pytest.raises(GBFormatError, match="duplicate vertex name") as excinfo:
        loads_gb(sText, iFlag_verify_checksum=0)

    assert excinfo.value.lineno == 5


def test_arc_outside_every_chain_is_rejected():
    sText = _gb(
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,2V,1A)",
        "\"g\",2,1",
        "* Vertices",
        "\"a\",0",
        "\"b\",0",
        "* Arcs",
        "V1,0,1",
    )

    with pytest.raises(GBFormatError, match="belongs to no vertex") as excinfo:
        loads_gb(sText, iFlag_verify_checksum=0)

    assert excinfo.value.lineno == 7


def test_looping_arc_chain_is_rejected():
    sText = _gb(
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,2V,1A)",
        "\"g\",2,1",
        "* Vertices",
        "\"a\",A0",
        "\"b\",0",
        "* Arcs",
        "V1,A0,1",
    )

    with pytest.raises(GBFormatError, match="loops"):
        loads_gb(sText, iFlag_verify_checksum=0)


@pytest.mark.parametrize("sArc", ["V7,0,1", "A0,0,1", "V1,A3,1", "V1,0,heavy", "V1,0", "V\u00b2,0,1", "V1,A\u00b2,1",
                                  "V1,0,99999999999999999999"])
def test_bad_arc_fields_are_rejected(sArc):
    sText = _gb(
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,2V,1A)",
        "\"g\",2,1",
        "* Vertices",
        "\"a\",A0",
        "\"b\",0",
        "* Arcs",
        sArc,
    )

    with pytest.raises(GBFormatError) as excinfo:
        loads_gb(sText, iFlag_verify_checksum=0)

    assert excinfo.value.lineno == 7


def test_sections_must_come_in_order():
    sText = _gb(
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,0V,0A)",
        "\"g\",0,0",
        "* Arcs",
        "* Vertices",
    )

    with pytest.raises(GBFormatError, match="unexpected line"):
        loads_gb(sText, iFlag_verify_checksum=0)


def test_text_after_checksum_is_rejected(look_feel_text):
    with pytest.raises(GBFormatError, match="after the checksum"):
        loads_gb(look_feel_text + "V0,0,1\n")


def test_unterminated_continuation_is_rejected(look_feel_text):
    sText = look_feel_text.replace("* Checksum 2372646\n", "V1,0,\\\n")

    with pytest.raises(GBFormatError, match="continued line"):
        loads_gb(sText, iFlag_verify_checksum=0)


def test_read_from_stream_uses_its_name():
    stream = io.StringIO("garbage\n")
    stream.name = "stream.gb"

    with pytest.raises(GBFormatError) as excinfo:
        read_gb(stream)

    assert excinfo.value.filename == "stream.gb"
