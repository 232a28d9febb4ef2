"""
Build the positional index for a corpus directory and print summary stats.

Usage:
    python build_index.py path/to/corpus [--output output] [--stopwords FILE]

Output (in the output directory, cleared first):
  - docids.txt      (docid -> document file name)
  - termids.txt     (termid -> stemmed term)
  - doc_index.txt   (forward index: docid, termid, positions)
  - term_index.txt  (inverted index, gap encoded, one term per line)
  - term_info.txt   (termid -> byte offset in term_index.txt, occurrences, doc count)
"""

import argparse
import sys
from pathlib import Path

from posindex.errors import OutputDirectoryError
from posindex.index_builder import build_all
from posindex.index_reader import IndexReader
from posindex.paths import DEFAULT_OUTPUT_DIR
from posindex.search_cli import configure_logging, print_progress
from posindex.stopwords import DEFAULT_STOP_WORDS_PATH, load_stop_words


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build a positional inverted index")
    parser.add_argument("corpus", type=Path, help="Directory of documents to index")
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Output directory for index files (default: output/)",
    )
    parser.add_argument(
        "--stopwords",
        type=Path,
        default=DEFAULT_STOP_WORDS_PATH,
        help="Stop-word list (default: bundled English list)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.corpus.is_dir():
        print(f"No corpus folder found at {args.corpus}.")
        return 1

    try:
        stop_words = load_stop_words(args.stopwords)
    except OSError as e:
        print(f"Could not read stop-word list {args.stopwords}: {e}", file=sys.stderr)
        return 1
    try:
        paths = build_all(args.corpus, args.output, stop_words, progress=print_progress)
    except OutputDirectoryError as e:
        print(e, file=sys.stderr)
        return 1

    reader = IndexReader(paths, stop_words)
    index_size_kb = paths.term_index.stat().st_size / 1024

    print("\n" + "=" * 50)
    print("INDEX SUMMARY")
    print("=" * 50)
    print()
    print("| Metric                      | Value |")
    print("|-----------------------------|-------|")
    print(f"| Number of indexed documents | {len(reader.doc_ids)} |")
    print(f"| Number of unique terms      | {len(reader.terms)} |")
    print(f"| Size of term_index (KB)     | {index_size_kb:.2f} |")
    print()
    print("=" * 50)
    print(f"\nIndex files saved to: {paths.root}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
