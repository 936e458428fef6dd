import sys

import pytest

import dictionary
from dictionary import (
    DictionaryLoadError,
    build_prefix_set,
    build_word_set,
    iter_source,
    load_dictionary,
    read_words,
)


@pytest.fixture
def word_file(tmp_path):
    p = tmp_path / "words.txt"
    p.write_text("cat\r\nact\n\nDog\nice cream\n", encoding="utf-8")
    return p


def test_read_words(word_file):
    assert list(read_words(word_file)) == ["cat", "act", "Dog", "ice cream"]


def test_read_words_missing_file(tmp_path):
    with pytest.raises(DictionaryLoadError) as excinfo:
        list(read_words(tmp_path / "missing.txt"))
    assert isinstance(excinfo.value.__cause__, OSError)


def test_missing_dictionary_is_not_fatal(tmp_path, capsys):
    word_set = build_word_set(read_words(tmp_path / "missing.txt"))
    assert len(word_set) == 0
    assert "Error attempting to load dictionary" in capsys.readouterr().err


def test_partial_dictionary_is_kept(capsys):
    def flaky_source():
        yield "cat"
        yield "act"
        raise DictionaryLoadError("disk went away")

    word_set = build_word_set(flaky_source())
    assert sorted(word_set) == ["act", "cat"]
    err = capsys.readouterr().err
    assert "disk went away" in err
    assert "Continuing with 2 words" in err


def test_duplicate_words_are_stored_once():
    word_set = build_word_set(["cat", "cat", "act"])
    assert len(word_set) == 2


def test_build_prefix_set():
    prefixes = build_prefix_set(build_word_set(["cat", "car", "a", "dog"]))
    assert sorted(prefixes) == ["c", "ca", "d", "do"]
    assert "cat" not in prefixes
    assert "a" not in prefixes


def test_wordfreq_source(monkeypatch):
    calls = []

    def fake_top_n_list(lang, n, wordlist="best"):
        calls.append((lang, n, wordlist))
        return ["the", "it's", "cat", "2020"]

    monkeypatch.setattr("wordfreq.top_n_list", fake_top_n_list)
    assert list(iter_source("wordfreq:fr", wordfreq_limit=10)) == ["the", "cat"]
    assert calls == [("fr", 10, "best")]

    list(iter_source("wordfreq:"))
    assert calls[-1] == ("en", dictionary.DEFAULT_WORDFREQ_LIMIT, "best")


def test_load_dictionary(word_file, capsys):
    words, prefixes = load_dictionary(str(word_file), verbose=True)
    assert "ice cream" in words
    assert "ice " in prefixes
    err = capsys.readouterr().err
    assert "Loaded 4 unique words" in err
    assert "Built prefix set containing" in err


def test_wordfreq_not_installed_is_reported(monkeypatch, capsys):
    monkeypatch.setitem(sys.modules, "wordfreq", None)
    word_set = build_word_set(iter_source("wordfreq:en"))
    assert len(word_set) == 0
    assert "wordfreq package is required" in capsys.readouterr().err
