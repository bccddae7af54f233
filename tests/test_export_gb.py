import io

import pytest

from graphbase import SerializationError, dumps_gb, new_graph, write_gb
from graphbase.formats.gb_format import GB_LINE_WIDTH, file_checksum


def test_look_feel_encoding(look_feel_graph, look_feel_text):
    assert dumps_gb(look_feel_graph) == look_feel_text


def test_write_to_path(look_feel_graph, look_feel_text, tmp_path):
    path = tmp_path / "look.gb"

    write_gb(look_feel_graph, path)

    assert path.read_text(encoding="utf-8") == look_feel_text


def test_write_to_string_path(look_feel_graph, look_feel_text, tmp_path):
    path = tmp_path / "look.gb"

    write_gb(look_feel_graph, str(path))

    assert path.read_text(encoding="utf-8") == look_feel_text


def test_write_to_stream(look_feel_graph, look_feel_text):
    stream = io.StringIO()

    write_gb(look_feel_graph, stream)

    assert stream.getvalue() == look_feel_text


def test_write_defaults_to_stdout(look_feel_graph, look_feel_text, capsys):
    write_gb(look_feel_graph)

    assert capsys.readouterr().out == look_feel_text


def test_empty_graph_encoding():
    aLine = dumps_gb(new_graph(0)).splitlines()

    assert aLine[:4] == [
        "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,0V,0A)",
        "\"anonymous\",0,0",
        "* Vertices",
        "* Arcs",
    ]
    assert aLine[4] == f"* Checksum {file_checksum(aLine[1:4])}"
    assert len(aLine) == 5


def test_arcs_are_chained_per_tail_vertex(branching_graph):
    aLine = dumps_gb(branching_graph).splitlines()

    assert aLine[0] == "* GraphBase graph (util_types ZZZZZZZZZZZZZZ,4V,3A)"
    assert aLine[2:-1] == [
        "* Vertices",
        "\"a\",A0",
        "\"b\",0",
        "\"c\",A2",
        "\"d\",0",
        "* Arcs",
        "V1,A1,5",
        "V2,0,2",
        "V3,0,7",
    ]


def test_utility_fields_are_encoded(utility_graph):
    aLine = dumps_gb(utility_graph).splitlines()

    assert aLine[0] == "* GraphBase graph (util_types ISVZZZAISZZZZZ,2V,2A)"
    assert aLine[1] == "\"utilities\",2,2,\"words\""
    assert aLine[3] == "\"x\",A0,42,\"hello, world\",V1"
    assert aLine[4] == "\"y\",A1,0,\"\",1"
    assert aLine[6] == "V1,0,3,A1,0"
    assert aLine[7] == "V0,0,-4,0,-7"


def test_long_lines_are_continued():
    graph = new_graph(2)
    sName = "n" * 200
    graph.add_arc(sName, "short", 1)

    aLine = dumps_gb(graph).splitlines()

    assert all(len(sLine) <= GB_LINE_WIDTH for sLine in aLine)
    aContinued = [sLine for sLine in aLine if sLine.endswith("\\")]
    assert len(aContinued) == 2
    assert "".join(sLine.rstrip("\\") for sLine in aLine[3:6]) == f"\"{sName}\",A0"


@pytest.mark.parametrize("sName", ['say "hi"', "back\\slash", "two\nlines"])
def test_unencodable_names_raise(sName):
    graph = new_graph(2)
    graph.add_arc(sName, "b", 1)

    with pytest.raises(SerializationError):
        dumps_gb(graph)


def test_unencodable_graph_id_raises():
    with pytest.raises(SerializationError):
        dumps_gb(new_graph(0, 'a"b'))


def test_unwritable_path_raises(look_feel_graph, tmp_path):
    path = tmp_path / "missing" / "look.gb"

    with pytest.raises(SerializationError) as excinfo:
        write_gb(look_feel_graph, path)

    assert isinstance(excinfo.value.cause, OSError)


def test_closed_stream_raises(look_feel_graph):
    stream = io.StringIO()
    stream.close()

    with pytest.raises(SerializationError):
        write_gb(look_feel_graph, stream)


def test_writing_does_not_modify_graph(branching_graph):
    aTriple = branching_graph.arc_triples()
    nVertex, nArc = branching_graph.n, branching_graph.m

    write_gb(branching_graph, io.StringIO())

    assert branching_graph.arc_triples() == aTriple
    assert (branching_graph.n, branching_graph.m) == (nVertex, nArc)
    assert branching_graph.get_out_arc_ids("a") == [0, 2]
