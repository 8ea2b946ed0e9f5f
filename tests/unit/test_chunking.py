"""Tests for word-window chunking."""

import pytest

from grounding_engine.chunking.word_chunker import WordWindowChunker, chunk_text, normalize_text
from grounding_engine.exceptions import ConfigurationError


def test_normalize_text():
    assert normalize_text("  Hello\r\n\r\n\r\n\r\nworld  ") == "Hello\n\nworld"


def test_short_text_is_single_normalized_chunk():
    text = "Once upon a time\r\nthere was a lighthouse.\n\n\n\nThe end."
    assert chunk_text(text) == ["Once upon a time\nthere was a lighthouse.\n\nThe end."]


def test_exactly_chunk_size_words_is_single_chunk(book_text):
    text = book_text(400)
    assert chunk_text(text, chunk_size=400, overlap=50) == [text]


def test_long_text_windows_overlap(book_text):
    words = book_text(1000).split()
    chunks = chunk_text(" ".join(words), chunk_size=400, overlap=50)

    assert len(chunks) == 3
    starts = [c.split()[0] for c in chunks]
    assert starts == ["word0", "word350", "word700"]
    assert len(chunks[0].split()) == 400
    assert len(chunks[2].split()) == 300
    # consecutive windows share exactly the overlap
    assert chunks[0].split()[-50:] == chunks[1].split()[:50]


def test_windows_rejoin_with_single_spaces():
    text = "alpha    beta\n\ngamma " * 200
    for chunk in chunk_text(text, chunk_size=100, overlap=10):
        assert "  " not in chunk
        assert "\n" not in chunk


def test_short_trailing_window_dropped():
    text = " ".join(["extraordinarily"] * 10 + ["x", "y"])
    chunks = chunk_text(text, chunk_size=10, overlap=0)
    assert len(chunks) == 1
    assert "x" not in chunks[0].split()


def test_no_multi_window_chunk_at_or_below_min_chars(book_text):
    chunks = chunk_text(book_text(1234, prefix="w"), chunk_size=40, overlap=5)
    assert all(len(c.strip()) > 50 for c in chunks)


def test_empty_text():
    assert chunk_text("   ") == [""]


@pytest.mark.parametrize("size,overlap", [(400, 400), (400, 500), (0, 0), (10, -1)])
def test_invalid_configuration(size, overlap):
    with pytest.raises(ConfigurationError):
        chunk_text("some text", chunk_size=size, overlap=overlap)


def test_chunker_rejects_overlap_at_construction():
    with pytest.raises(ConfigurationError):
        WordWindowChunker(chunk_size=50, overlap=50)


def test_word_count():
    assert WordWindowChunker.word_count("one two\nthree") == 3
