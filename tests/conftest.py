from pathlib import Path

import pytest

from posindex.index_builder import build_all


def write_corpus(corpus_dir: Path, docs: dict[str, str]) -> Path:
    """Write {relative name: content} under corpus_dir and return it."""
    corpus_dir.mkdir(parents=True, exist_ok=True)
    for name, content in docs.items():
        path = corpus_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return corpus_dir


def html(text: str) -> str:
    return f"<!DOCTYPE html><html><head><title></title></head><body><p>{text}</p></body></html>"


@pytest.fixture
def stop_words() -> frozenset[str]:
    return frozenset({"the", "a", "of"})


@pytest.fixture
def run_corpus(tmp_path: Path) -> Path:
    return write_corpus(
        tmp_path / "corpus",
        {
            "a.html": html("run runs running"),
            "b.html": html("running fast"),
        },
    )


@pytest.fixture
def run_index(tmp_path: Path, run_corpus: Path, stop_words):
    """Index directory built from run_corpus."""
    return build_all(run_corpus, tmp_path / "output", stop_words)
