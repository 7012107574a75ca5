import itertools
import logging

from chordcharts.models import (
    ChordDefinition,
    Chorus,
    ColumnBreak,
    Comment,
    EndOfChorus,
    EndOfTab,
    Key,
    Line,
    NewSong,
    PageBreak,
    StartColumns,
    SubTitle,
    Tab,
    Title,
)
from chordcharts.parser import parse_file, parse_fingering, parse_lines, parse_text, split_chords

# ---------------------------------------------------------------------------
# split_chords
# ---------------------------------------------------------------------------


def test_split_chords_alternates_text_and_chords():
    assert split_chords("[Am]Home[C]again") == ["", "Am", "Home", "C", "again"]


def test_split_chords_plain_line():
    assert split_chords("no chords here") == ["no chords here"]


def test_split_chords_empty_line():
    assert split_chords("") == [""]


def test_split_chords_trailing_chord_ends_with_empty_text():
    assert split_chords("end[G]") == ["end", "G", ""]


def test_split_chords_unclosed_bracket_kept_as_text():
    assert split_chords("one [Am two") == ["one [Am two"]


def test_split_chords_adjacent_chords():
    assert split_chords("[D][G]x") == ["", "D", "", "G", "x"]


def test_tabs_expanded_to_four_spaces():
    assert parse_text("a\t[C]b") == [Line(segments=["a    ", "C", "b"])]


# ---------------------------------------------------------------------------
# Source comments
# ---------------------------------------------------------------------------


def test_hash_lines_dropped():
    assert parse_text("# a comment\n   # indented\n{title: T}") == [Title(text="T")]


def test_hash_lines_dropped_inside_tab():
    elements = parse_text("{sot}\n# hidden\ne|--0--|\n{eot}")
    assert elements == [Tab(lines=["e|--0--|"])]


# ---------------------------------------------------------------------------
# Simple directives
# ---------------------------------------------------------------------------


def test_title_aliases():
    assert parse_text("{title: One}\n{t:Two}\n{TITLE : Three}") == [
        Title(text="One"),
        Title(text="Two"),
        Title(text="Three"),
    ]


def test_subtitle_aliases():
    assert parse_text("{subtitle: A}\n{st: B}") == [SubTitle(text="A"), SubTitle(text="B")]


def test_comment_aliases():
    elements = parse_text("{comment: a}\n{c: b}\n{ci: c}\n{cb: d}")
    assert elements == [Comment(text=t) for t in "abcd"]


def test_breaks_and_new_song():
    elements = parse_text("{colb}\n{column_break}\n{np}\n{page_break}\n{new_page}\n{new_song}\n{ns}")
    assert elements == [
        ColumnBreak(),
        ColumnBreak(),
        PageBreak(),
        PageBreak(),
        PageBreak(),
        NewSong(),
        NewSong(),
    ]


def test_unknown_directive_becomes_comment(caplog):
    with caplog.at_level(logging.WARNING):
        elements = parse_text("{flavour: vanilla}")
    assert elements == [Comment(text="{flavour: vanilla}")]
    assert "Unknown directive" in caplog.text


# ---------------------------------------------------------------------------
# define
# ---------------------------------------------------------------------------


def test_define_guitar_chord():
    elements = parse_text("{define: Bm7 base-fret 2 frets x 1 3 1 2 1}")
    assert elements == [ChordDefinition(name="Bm7", fingering=(2, -1, 1, 3, 1, 2, 1))]


def test_define_muted_tokens():
    assert parse_fingering("D base-fret 0 frets X - 0 2 3 2") == ("D", (0, -1, -1, 0, 2, 3, 2))


def test_define_four_string_chord():
    assert parse_fingering("G base-fret 0 frets 0 0 2 3") == ("G", (0, 0, 0, 2, 3))


def test_define_bad_fret_token_becomes_comment(caplog):
    line = "{define: Am base-fret 0 frets x 0 2 y 1 0}"
    with caplog.at_level(logging.WARNING):
        elements = parse_text(line)
    assert elements == [Comment(text=line)]
    assert "Bad chord definition" in caplog.text


def test_define_too_few_frets_becomes_comment():
    line = "{define: Am base-fret 0 frets x 0 2}"
    assert parse_text(line) == [Comment(text=line)]


def test_define_missing_base_fret_becomes_comment():
    assert parse_fingering("Am frets x 0 2 2 1 0") is None


# ---------------------------------------------------------------------------
# Chorus
# ---------------------------------------------------------------------------


def test_chorus_collects_lines():
    elements = parse_text("{soc}\n[G]one\ntwo\nthree\n{eoc}\nafter")
    assert len(elements) == 2
    chorus = elements[0]
    assert isinstance(chorus, Chorus)
    assert len(chorus.elements) == 3
    assert chorus.elements[0] == Line(segments=["", "G", "one"])
    assert elements[1] == Line(segments=["after"])


def test_chorus_long_aliases():
    elements = parse_text("{start_of_chorus}\nx\n{end_of_chorus}")
    assert elements == [Chorus(elements=[Line(segments=["x"])])]


def test_nested_chorus():
    elements = parse_text("{soc}\na\n{soc}\nb\n{eoc}\nc\n{eoc}")
    assert elements == [
        Chorus(elements=[
            Line(segments=["a"]),
            Chorus(elements=[Line(segments=["b"])]),
            Line(segments=["c"]),
        ])
    ]


def test_chorus_keeps_directives():
    elements = parse_text("{soc}\n{c: twice}\n{eoc}")
    assert elements == [Chorus(elements=[Comment(text="twice")])]


def test_unclosed_chorus_closed_at_end(caplog):
    with caplog.at_level(logging.WARNING):
        elements = parse_text("{soc}\na\nb")
    assert elements == [Chorus(elements=[Line(segments=["a"]), Line(segments=["b"])])]
    assert "Chorus not closed" in caplog.text


def test_unclosed_chorus_stops_at_new_song(caplog):
    with caplog.at_level(logging.WARNING):
        elements = parse_text("{soc}\na\n{new_song}\n{title: Next}")
    assert elements == [
        Chorus(elements=[Line(segments=["a"])]),
        NewSong(),
        Title(text="Next"),
    ]
    assert "Chorus not closed before new song" in caplog.text


def test_new_song_closes_nested_choruses():
    elements = parse_text("{soc}\n{soc}\na\n{ns}\nb")
    assert elements == [
        Chorus(elements=[Chorus(elements=[Line(segments=["a"])])]),
        NewSong(),
        Line(segments=["b"]),
    ]


def test_stray_end_of_chorus_is_an_element():
    assert parse_text("a\n{eoc}") == [Line(segments=["a"]), EndOfChorus()]


# ---------------------------------------------------------------------------
# Tab
# ---------------------------------------------------------------------------


def test_tab_lines_verbatim():
    elements = parse_text("{sot}\ne|--0--|\n[Am] {title: x}\n{eot}\n{title: After}")
    assert elements == [
        Tab(lines=["e|--0--|", "[Am] {title: x}"]),
        Title(text="After"),
    ]


def test_tab_long_aliases():
    assert parse_text("{start_of_tab}\nB|-1-|\n{end_of_tab}") == [Tab(lines=["B|-1-|"])]


def test_unclosed_tab(caplog):
    with caplog.at_level(logging.WARNING):
        elements = parse_text("{sot}\nG|-2-|")
    assert elements == [Tab(lines=["G|-2-|"])]
    assert "Tab not closed" in caplog.text


def test_stray_end_of_tab_is_an_element():
    assert parse_text("{eot}") == [EndOfTab()]


# ---------------------------------------------------------------------------
# columns / key
# ---------------------------------------------------------------------------


def test_columns():
    assert parse_text("{columns: 2}\n{col:3}") == [StartColumns(count=2), StartColumns(count=3)]


def test_bad_columns_becomes_comment(caplog):
    with caplog.at_level(logging.WARNING):
        elements = parse_text("{columns: two}\n{col: 0}")
    assert elements == [Comment(text="{columns: two}"), Comment(text="{col: 0}")]
    assert "Bad column count" in caplog.text


def test_key():
    assert parse_text("{key: Em}") == [Key(name="Em")]


def test_unknown_key_becomes_comment():
    assert parse_text("{key: H}") == [Comment(text="{key: H}")]


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def test_title_and_line_song():
    assert parse_text("{title: Test}\n[Am]Home[C]again") == [
        Title(text="Test"),
        Line(segments=["", "Am", "Home", "C", "again"]),
    ]


def test_parse_lines_strips_line_endings():
    assert list(parse_lines(["{t: X}\r\n", "a\n"])) == [Title(text="X"), Line(segments=["a"])]


def test_parse_lines_is_lazy():
    elements = parse_lines(itertools.repeat("la la"))
    assert next(elements) == Line(segments=["la la"])


def test_parse_file(tmp_path):
    song = tmp_path / "song.chopro"
    song.write_text("{title: File}\n[D]x\n", encoding="utf-8")
    assert list(parse_file(song)) == [Title(text="File"), Line(segments=["", "D", "x"])]


def test_byte_order_mark_before_first_directive():
    assert parse_text("\ufeff{title: X}\na") == [Title(text="X"), Line(segments=["a"])]


def test_parse_file_with_byte_order_mark(tmp_path):
    song = tmp_path / "bom.chopro"
    song.write_text("{title: File}\n", encoding="utf-8-sig")
    assert list(parse_file(song)) == [Title(text="File")]
