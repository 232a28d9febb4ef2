import logging

import pytest

from posindex.errors import (
    DocumentNotFoundError,
    MissingArtifactError,
    TermNotFoundError,
    TermNotInDocumentError,
    UnstemmableTermError,
)
from posindex.index_builder import build_all
from posindex.index_reader import IndexReader
from posindex.paths import IndexPaths

from conftest import html, write_corpus


@pytest.fixture
def reader(run_index, stop_words):
    return IndexReader(run_index, stop_words)


def test_loads_id_maps(reader):
    assert reader.doc_ids == {"a.html": 1, "b.html": 2}
    assert reader.terms == {1: "run", 2: "fast"}
    assert reader.term_ids == {"run": 1, "fast": 2}
    assert reader.doc_index == {1: {1: [1, 2, 3]}, 2: {1: [1], 2: [2]}}


def test_doc_info(reader, capsys):
    info = reader.doc_info("a.html")
    assert (info.doc_id, info.distinct_terms, info.total_terms) == (1, 1, 3)

    reader.print_doc_info("a.html")
    out = capsys.readouterr().out
    assert "DOCID: 1" in out
    assert "Distinct terms: 1" in out
    assert "Total terms: 3" in out


def test_term_stats(reader, capsys):
    stats = reader.term_stats("run")
    assert (stats.term_id, stats.doc_count, stats.total_occurrences, stats.offset) == (1, 2, 4, 0)
    assert reader.term_stats("fast").offset == 18

    reader.print_term_info("run")
    out = capsys.readouterr().out
    assert "TERMID: 1" in out
    assert "Number of documents containing term: 2" in out
    assert "Term frequency in corpus: 4" in out
    assert "Inverted list offset: 0" in out


def test_query_term_is_normalized(reader):
    assert reader.resolve_term("Running") == 1
    assert reader.resolve_term("RUNS fast") == 1


def test_term_doc_info(reader, capsys):
    info = reader.term_doc_info("run", "b.html")
    assert (info.term_id, info.doc_id, info.tf, info.positions) == (1, 2, 1, [1])
    assert reader.term_doc_info("running", "a.html").positions == [1, 2, 3]

    reader.print_term_doc_info("run", "b.html")
    out = capsys.readouterr().out
    assert "TERMID: 1" in out
    assert "DOCID: 2" in out
    assert "Term frequency in document: 1" in out
    assert "Positions: 1" in out


def test_read_postings(reader):
    assert reader.read_postings(1) == {1: [1, 2, 3], 2: [1]}
    assert reader.read_postings(2) == {2: [2]}


def test_lookup_errors(reader):
    with pytest.raises(DocumentNotFoundError):
        reader.doc_info("missing.html")
    with pytest.raises(TermNotFoundError):
        reader.term_stats("zebra")
    with pytest.raises(UnstemmableTermError):
        reader.term_stats("the")
    with pytest.raises(UnstemmableTermError):
        reader.term_stats("!!!")
    with pytest.raises(TermNotInDocumentError):
        reader.term_doc_info("fast", "a.html")


def test_print_methods_report_not_found(reader, capsys):
    reader.print_doc_info("missing.html")
    reader.print_term_info("zebra")
    reader.print_term_info("the")
    reader.print_term_doc_info("run", "missing.html")
    reader.print_term_doc_info("fast", "a.html")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Document not found: missing.html" in captured.err
    assert "Term not found: zebra" in captured.err
    assert "Unable to stem term: the" in captured.err
    assert "not found in document: a.html" in captured.err


def test_document_without_terms(tmp_path, stop_words):
    corpus = write_corpus(tmp_path / "corpus", {"empty.html": html("the of a"), "fox.html": html("fox")})
    paths = build_all(corpus, tmp_path / "out", stop_words)
    reader = IndexReader(paths, stop_words)
    info = reader.doc_info("empty.html")
    assert (info.doc_id, info.distinct_terms, info.total_terms) == (1, 0, 0)


def test_missing_artifact_is_fatal(tmp_path, stop_words):
    with pytest.raises(MissingArtifactError):
        IndexReader(tmp_path, stop_words)
    with pytest.raises(FileNotFoundError):
        IndexReader(IndexPaths(tmp_path / "nope"), stop_words)


def test_malformed_lines_are_skipped(tmp_path, caplog):
    paths = IndexPaths(tmp_path)
    paths.doc_ids.write_text("1\ta.html\nx\tb.html\nlonely\n", encoding="utf-8")
    paths.term_ids.write_text("1   \tfox\n2\n\nz\tbad\n", encoding="utf-8")
    paths.doc_index.write_text("1\t1\t1 2\n1\tq\t3\n", encoding="utf-8")
    paths.term_index.write_text("1\t1:1\t0:1\n", encoding="utf-8")
    paths.term_info.write_text("1\t0\t2\t1\n2\t0\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        reader = IndexReader(paths, set())
    assert reader.doc_ids == {"a.html": 1}
    assert reader.terms == {1: "fox"}
    assert reader.doc_index == {1: {1: [1, 2]}}
    assert list(reader.term_info) == [1]
    assert caplog.text.count("Skipping malformed line") == 6


def test_bad_offset_is_reported_without_output(run_index, stop_words, capsys, caplog):
    run_index.term_info.write_text("1\t3\t4\t2\n", encoding="utf-8")
    reader = IndexReader(run_index, stop_words)
    with caplog.at_level(logging.ERROR):
        reader.print_term_doc_info("run", "a.html")
    assert capsys.readouterr().out == ""
    assert "Corrupt inverted list" in caplog.text


def test_unreadable_term_index_is_reported(run_index, stop_words, capsys, caplog):
    reader = IndexReader(run_index, stop_words)
    run_index.term_index.unlink()
    with caplog.at_level(logging.ERROR):
        reader.print_term_doc_info("run", "a.html")
    assert capsys.readouterr().out == ""
    assert "Failed to read inverted list" in caplog.text
