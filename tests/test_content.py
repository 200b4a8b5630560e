"""Tests for line classification and entry parsing in aptlist.content."""

# pylint: disable=missing-function-docstring, protected-access
from pytest import mark, raises

from aptlist import content
from aptlist.errors import InvalidValue, MissingField
from aptlist.models import Comment, Empty, Entry, Malformed, SourceEntry, SourcesFile


def test_binary_entry():
    line = content.parse_line(
        "deb http://us.archive.ubuntu.com/ubuntu/ cosmic main restricted"
    )

    assert line == Entry(
        SourceEntry(
            is_source=False,
            options=None,
            url="http://us.archive.ubuntu.com/ubuntu/",
            suite="cosmic",
            components=("main", "restricted"),
        )
    )


def test_source_entry_with_options():
    line = content.parse_line(
        "deb-src [trusted=yes] http://ppa.example/ubuntu cosmic main"
    )

    assert isinstance(line, Entry)
    assert line.entry.is_source is True
    assert line.entry.options == "trusted=yes"
    assert line.entry.url == "http://ppa.example/ubuntu"
    assert line.entry.components == ("main",)


@mark.parametrize(
    "text",
    [
        "deb [ arch=amd64 ] http://apt.pop-os.org/proprietary cosmic main",
        "deb [arch=amd64 ] http://apt.pop-os.org/proprietary cosmic main",
        "deb [ arch=amd64] http://apt.pop-os.org/proprietary cosmic main",
        "deb [arch=amd64]http://apt.pop-os.org/proprietary cosmic main",
        "deb [ arch=amd64 ]http://apt.pop-os.org/proprietary cosmic main",
        "  deb\t[arch=amd64]   http://apt.pop-os.org/proprietary\tcosmic  main  ",
    ],
)
def test_option_spacing_variants(text):
    assert content.parse_line(text) == Entry(
        SourceEntry(
            is_source=False,
            options="arch=amd64",
            url="http://apt.pop-os.org/proprietary",
            suite="cosmic",
            components=("main",),
        )
    )


def test_multiple_and_empty_options():
    multi = content.parse_entry(
        "deb [arch=amd64,i386 signed-by=/usr/share/keyrings/x.gpg] http://h/r stable main"
    )
    empty = content.parse_entry("deb [] http://h/r stable main")
    blank = content.parse_entry("deb [   ] http://h/r stable main")

    assert multi.options == "arch=amd64,i386 signed-by=/usr/share/keyrings/x.gpg"
    assert empty.options == ""
    assert blank.options == ""


def test_flat_repository_has_no_components():
    entry = content.parse_entry("deb http://example.com/repo ./")

    assert entry.suite == "./"
    assert entry.components == ()
    assert not list(entry.dist_components())


def test_component_order_and_duplicates_preserved():
    entry = content.parse_entry("deb http://h/r sid non-free main contrib main")

    assert entry.components == ("non-free", "main", "contrib", "main")


def test_comment_lines_are_verbatim():
    text = "# deb cdrom:[Ubuntu 18.10 _Cosmic Cuttlefish_]/ cosmic main restricted"
    indented = "   #deb http://h/r cosmic main"

    assert content.parse_line(text) == Comment(text)
    assert content.parse_line(indented) == Comment(indented)
    assert content.parse_line("#") == Comment("#")


@mark.parametrize("text", ["", " ", "\t", "   \t  "])
def test_blank_lines_are_empty(text):
    line = content.parse_line(text)

    assert line == Empty()
    assert str(line) == text


@mark.parametrize(
    "text",
    [
        "deb http://example.com/repo",
        "deb",
        "deb-src   ",
        "deb [arch=amd64]",
        "deb [arch=amd64 http://h/r cosmic main",
        "DEB http://h/r cosmic main",
        "rpm http://h/r cosmic main",
        "debian http://h/r cosmic main",
        "deb # http://h/r cosmic main",
        'deb "http://h/r cosmic main',
        "<html>",
    ],
)
def test_malformed_lines_keep_original_text(text):
    assert content.parse_line(text) == Malformed(text)


def test_parse_entry_reports_failing_field():
    with raises(MissingField) as missing_suite:
        content.parse_entry("deb http://example.com/repo")
    with raises(MissingField) as missing_url:
        content.parse_entry("deb-src [arch=amd64]")
    with raises(InvalidValue) as bad_type:
        content.parse_entry("deb-foo http://h/r cosmic")
    with raises(InvalidValue) as bad_options:
        content.parse_entry("deb [arch=amd64 http://h/r cosmic")

    assert missing_suite.value.field == "suite"
    assert missing_url.value.field == "url"
    assert bad_type.value.field == "type"
    assert bad_type.value.value == "deb-foo"
    assert bad_options.value.field == "options"


def test_inline_comment_is_stripped_and_kept():
    line = content.parse_line("deb http://h/r cosmic main universe # disabled by me")

    assert isinstance(line, Entry)
    assert line.entry.components == ("main", "universe")
    assert line.comment == "# disabled by me"
    assert line == content.parse_line("deb http://h/r cosmic main universe")


def test_hash_inside_token_is_literal():
    entry = content.parse_entry("deb http://h/r#frag cosmic ma#in")
    escaped = content.parse_entry(r"deb http://h/r cosmic \#main")

    assert entry.url == "http://h/r#frag"
    assert entry.components == ("ma#in",)
    assert escaped.components == ("#main",)


def test_inline_comment_may_follow_suite_only():
    line = content.parse_line("deb http://example.com/repo ./#flat")
    commented = content.parse_line("deb http://example.com/repo ./ #flat")

    assert isinstance(line, Entry) and line.entry.suite == "./#flat"
    assert isinstance(commented, Entry)
    assert commented.entry.suite == "./"
    assert commented.comment == "#flat"


def test_quoted_tokens_may_contain_spaces():
    entry = content.parse_entry('deb "http://h/my repo" cosmic "main part"')

    assert entry.url == "http://h/my repo"
    assert entry.components == ("main part",)


def test_empty_quoted_url_is_malformed():
    assert isinstance(content.parse_line('deb "" cosmic main'), Malformed)


def test_parsing_is_idempotent():
    text = "deb-src [arch=amd64] http://h/r cosmic main # note"

    assert content.parse_line(text) == content.parse_line(text)


def test_parse_text_one_line_per_physical_line():
    text = (
        "# header\n"
        "\n"
        "deb http://h/r cosmic main\n"
        "garbage here\n"
        "deb-src http://h/r cosmic main\n"
    )

    lines = content.parse_text(text)

    assert [type(line) for line in lines] == [Comment, Empty, Entry, Malformed, Entry]


def test_bad_line_does_not_affect_neighbours():
    lines = content.parse_lines(
        ["deb http://a/r cosmic main", "deb [oops http://b/r", "deb http://c/r cosmic"]
    )

    assert isinstance(lines[0], Entry) and lines[0].entry.url == "http://a/r"
    assert isinstance(lines[1], Malformed)
    assert isinstance(lines[2], Entry) and lines[2].entry.url == "http://c/r"


def test_round_trip_serialization():
    text = (
        "# Main archive\n"
        "\n"
        "deb   http://h/ubuntu/  cosmic main\trestricted\n"
        "  \n"
        "deb-src [ arch=amd64 ] http://h/ubuntu/ cosmic main # sources\n"
        "deb http://example.com/repo ./\n"
    )

    lines = content.parse_text(text)
    rendered = "\n".join(str(line) for line in lines)

    assert content.parse_text(rendered) == lines
    assert rendered.splitlines()[0] == "# Main archive"
    assert rendered.splitlines()[2] == "deb http://h/ubuntu/ cosmic main restricted"
    assert rendered.splitlines()[3] == "  "
    assert rendered.splitlines()[4] == (
        "deb-src [arch=amd64] http://h/ubuntu/ cosmic main # sources"
    )


def test_tokenize_helpers():
    assert content._tokenize("  a  b\tc ") == (["a", "b", "c"], None)
    assert content._tokenize("a #b c") == (["a"], "#b c")
    assert content._split_options(" [x=y] rest") == ("x=y", " rest")
    assert content._split_options("rest") == (None, "rest")
    assert content._split_type("deb-src  rest") == (True, "rest")


def test_round_trip_quoting_and_escapes():
    text = r'deb "http://h/my repo" cosmic \#main "main part"'

    line = content.parse_line(text)

    assert str(line) == text
    assert content.parse_line(str(line)) == line


def test_bracket_group_inside_url():
    entry = content.parse_entry("deb cdrom:[Ubuntu 18.10 _Cosmic_]/ cosmic main")

    assert entry.url == "cdrom:[Ubuntu 18.10 _Cosmic_]/"
    assert entry.suite == "cosmic"
    assert entry.components == ("main",)
    assert isinstance(content.parse_line("deb cdrom:[Ubuntu cosmic main"), Malformed)


@mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", " "])
def test_parse_text_splits_on_newline_only(separator):
    text = f"# disabled{separator}deb http://evil/r cosmic main\n"

    lines = content.parse_text(text)

    assert lines == [Comment(f"# disabled{separator}deb http://evil/r cosmic main")]


def test_parse_text_line_endings():
    lines = content.parse_text("deb http://h/r cosmic main\r\n\r\n# last")

    assert [type(line) for line in lines] == [Entry, Empty, Comment]
    assert lines[0].entry.components == ("main",)
    assert lines[2] == Comment("# last")
    assert content.parse_text("") == []
    assert content.parse_text("\n") == [Empty("")]


def test_file_with_unusual_separator_round_trips():
    text = "# caf\x85 note\ndeb http://h/r cosmic main\n"

    sources_file = SourcesFile(path="x.list", lines=content.parse_text(text))

    assert len(sources_file.lines) == 2
    assert str(sources_file) == text


@mark.parametrize(
    "text, url",
    [
        ('deb "http://h/a [b c" cosmic main', "http://h/a [b c"),
        ('deb "http://h/a[b c" cosmic main', "http://h/a[b c"),
        ('deb "http://h/a[b" cosmic main', "http://h/a[b"),
        ('deb "#x y" cosmic main', "#x y"),
    ],
)
def test_round_trip_unbalanced_bracket_and_hash(text, url):
    line = content.parse_line(text)

    assert isinstance(line, Entry)
    assert line.entry.url == url
    assert content.parse_line(str(line)) == line


def test_balanced_bracket_group_stays_unquoted():
    text = "deb cdrom:[Ubuntu 18.10 _Cosmic_]/ cosmic main"

    assert str(content.parse_line(text)) == text
