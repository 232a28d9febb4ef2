"""
Interactive lookup shell over a freshly built positional index.

Asks for a corpus directory (unless --corpus is given), builds the index into
the output directory, then answers one query per line:

    --doc <docname>
    --term <term>
    --term <term> --doc <docname>
    exit

Usage (from repo root):
    python -m posindex.search_cli --output output --stopwords posindex/stopwords.txt
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Iterable

from .errors import OutputDirectoryError
from .index_builder import build_all
from .index_reader import IndexReader
from .paths import DEFAULT_OUTPUT_DIR
from .stopwords import DEFAULT_STOP_WORDS_PATH, load_stop_words

logger = logging.getLogger(__name__)

USAGE = "Usage: --doc <docname> | --term <term> | --term <term> --doc <docname> | exit"
QUERY_FLAGS = ("--doc", "--term")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def print_progress(done: int, total: int) -> None:
    print(f"\rProcessing files: {done}/{total}", end="", flush=True)
    if done == total:
        print()


def split_command(line: str) -> list[str]:
    """
    Split a query line on whitespace. Double quotes group words; apostrophes
    and backslashes are ordinary characters so names like don't.html survive.
    An unbalanced double quote falls back to a plain whitespace split.
    """
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.quotes = '"'
    lexer.escape = ""
    lexer.commenters = ""
    try:
        return list(lexer)
    except ValueError:
        return line.split()


def parse_command(line: str) -> dict[str, str] | None:
    """
    Parse a query line into {"term": ..., "doc": ...} (either key optional).
    Each flag takes the words up to the next flag as its value.
    Returns None if the line is not a valid query.
    """
    query: dict[str, list[str]] = {}
    current: list[str] | None = None
    for token in split_command(line):
        if token in QUERY_FLAGS:
            key = token[2:]
            if key in query:
                return None
            current = query[key] = []
        elif current is None:
            return None
        else:
            current.append(token)
    if not query or any(not words for words in query.values()):
        return None
    return {key: " ".join(words) for key, words in query.items()}


def run_query(reader: IndexReader, query: dict[str, str]) -> None:
    term = query.get("term")
    doc = query.get("doc")
    if term is not None and doc is not None:
        reader.print_term_doc_info(term, doc)
    elif term is not None:
        reader.print_term_info(term)
    else:
        reader.print_doc_info(doc)


def run_search_loop(reader: IndexReader) -> None:
    """
    Read queries from stdin until "exit" or EOF.
    """
    print(USAGE)
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        if line == "exit":
            break
        query = parse_command(line)
        if query is None:
            print(USAGE)
            continue
        run_query(reader, query)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build a positional index and query it interactively.")
    parser.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="Corpus directory (prompted for when omitted).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory for the index files (cleared before building).",
    )
    parser.add_argument(
        "--stopwords",
        type=Path,
        default=DEFAULT_STOP_WORDS_PATH,
        help="Stop-word list, one word per line.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress details.")
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.verbose)

    corpus_dir = args.corpus
    if corpus_dir is None:
        try:
            corpus_dir = Path(input("Enter corpus directory: ").strip())
        except EOFError:
            print()
            return 1
    if not corpus_dir.is_dir():
        print(f"Corpus directory not found: {corpus_dir}", file=sys.stderr)
        return 1

    try:
        stop_words = load_stop_words(args.stopwords)
    except OSError as e:
        print(f"Could not read stop-word list {args.stopwords}: {e}", file=sys.stderr)
        return 1
    try:
        paths = build_all(corpus_dir, args.output, stop_words, progress=print_progress)
    except OutputDirectoryError as e:
        print(e, file=sys.stderr)
        return 1

    reader = IndexReader(paths, stop_words)
    print(f"Loaded index for {len(reader.doc_ids)} documents and {len(reader.terms)} terms.")
    run_search_loop(reader)
    return 0


if __name__ == "__main__":
    sys.exit(main())
