import pytest

from morgengrau.pipeline.text_repair import (
    REPAIR_TABLE,
    RepairTable,
    decode,
    normalize,
    remove_whitespace,
    repair,
    title,
    trim,
)


@pytest.mark.parametrize("text, expected", [
    ("Mrz", "März"),
    ("1. Mrz 2004", "1. März 2004"),
    ("m&B", "m'n'B"),
    ("Rhythm&Blues Night", "Rhythm'n'Blues Night"),
    ('"Live" im Gebude', "Live im Gebäude"),
    ("Gewlbe", "Gewölbe"),
])
def test_repair_table_substitutions(text, expected):
    assert repair(text) == expected


def test_repair_rewrites_relative_event_link():
    assert repair("show_event.pl?sts=det&id=7") == (
        "https://morgengrau.net/cgi-bin/morgengrau/show_event.pl?sts=det&id=7"
    )


def test_repair_table_is_versioned_and_ordered():
    assert REPAIR_TABLE.version
    assert REPAIR_TABLE.substitutions[0] == ("m&B", "m'n'B")
    assert REPAIR_TABLE.substitutions[-1][0] == "show_event.pl?sts=det&"


def test_custom_repair_table_applies_in_order():
    table = RepairTable(version="test", substitutions=(("ab", "b"), ("bb", "c")))
    assert repair("abb", table) == "c"


def test_decode_transliterates_to_ascii():
    assert decode("Café Größe") == "Cafe Grosse"


def test_normalize_decodes_before_repair():
    assert normalize("“Rhythm&Blues”") == "Rhythm'n'Blues"


def test_trim_repairs_and_strips():
    assert trim('  "Club X"  ') == "Club X"


def test_title_cases_each_word():
    assert title("  the BLUES night ") == "The Blues Night"


def test_title_keeps_apostrophe_words_together():
    assert title("Rhythm&Blues party") == "Rhythm'n'blues Party"


def test_remove_whitespace_drops_internal_spacing():
    assert remove_whitespace("A  B\tC") == "ABC"
    assert remove_whitespace(" x\ny\r\n z ") == "xyz"
