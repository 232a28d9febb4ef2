"""Stop-word list loading."""

from pathlib import Path

DEFAULT_STOP_WORDS_PATH = Path(__file__).resolve().parent / "stopwords.txt"


def load_stop_words(path: Path | None = None) -> frozenset[str]:
    """
    Load stop words from a UTF-8 text file, one surface form per line.
    Surrounding whitespace is trimmed and blank lines are skipped.
    Uses the bundled English list when path is None.
    """
    path = Path(path) if path is not None else DEFAULT_STOP_WORDS_PATH
    with open(path, "r", encoding="utf-8") as f:
        return frozenset(line.strip() for line in f if line.strip())
