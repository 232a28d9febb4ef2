"""
Text extraction and normalization shared by the indexer and the index reader.

normalize() is the single tokenize -> lowercase -> stop-filter -> Porter stem
path. The indexer uses it to assign term ids and the reader uses it to turn
query terms back into the same ids, so both sides must call it with the same
stop-word set.
"""

import locale
import logging
import re
import warnings
from pathlib import Path
from typing import Iterable

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk.stem import PorterStemmer

from .errors import DocumentDecodeError

logger = logging.getLogger(__name__)

_STEMMER = PorterStemmer()

# Word runs optionally joined by single dots: "u.s.a", "3.14", "index.html".
TOKEN_PATTERN = re.compile(r"\w+(?:\.?\w+)*")

# Markers that start the HTML region of a document, tried in order.
HTML_START_MARKERS = ("<!DOCTYPE", "<html", "<")


def tokenize(text: str) -> list[str]:
    """Return the lowercased regex matches of text, left to right."""
    if not text:
        return []
    return [m.group().lower() for m in TOKEN_PATTERN.finditer(text)]


def remove_stop_words(tokens: Iterable[str], stop_words: frozenset[str] | set[str]) -> list[str]:
    return [t for t in tokens if t not in stop_words]


def stem_token(word: str) -> str:
    """Return Porter stem of word."""
    return _STEMMER.stem(word)


def stem_tokens(tokens: list[str]) -> list[str]:
    """
    Stem a list of tokens, one stem per token.
    If the stemmer fails part way, the error is logged and the stems produced
    so far are returned.
    """
    stemmed: list[str] = []
    for token in tokens:
        try:
            stemmed.append(_STEMMER.stem(token))
        except (LookupError, ValueError) as e:
            logger.error("Error during stemming of %r: %s", token, e)
            break
    return stemmed


def normalize(text: str, stop_words: frozenset[str] | set[str]) -> list[str]:
    """
    Tokenize, lowercase, drop stop words and stem.
    Index i of the result (1-based) is the position of that term in text.
    """
    return stem_tokens(remove_stop_words(tokenize(text), stop_words))


def extract_text_from_html(html_content: str) -> str:
    """
    Extract visible text from HTML content, stripping tags and scripts.
    """
    soup = BeautifulSoup(html_content, "lxml")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(separator=" ", strip=True)


def extract_document_text(content: str) -> str:
    """
    Return the visible text of a document that may carry mail-style headers.

    The HTML region starts at the first "<!DOCTYPE", else the first "<html",
    else the first "<". Without any of those the document is treated as plain
    text: headers end at the first blank line and the rest is returned trimmed.
    """
    for marker in HTML_START_MARKERS:
        start = content.find(marker)
        if start != -1:
            return extract_text_from_html(content[start:])
    headers_end = content.find("\n\n")
    if headers_end != -1:
        return content[headers_end:].strip()
    return content.strip()


def document_encodings() -> tuple[str, ...]:
    return ("utf-8", "iso-8859-1", locale.getpreferredencoding(False))


def read_document_file(filepath: Path) -> str:
    """
    Read a document, trying UTF-8, then ISO-8859-1, then the platform default.
    """
    raw = Path(filepath).read_bytes()
    for encoding in document_encodings():
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug("Could not decode %s as %s", filepath, encoding)
            continue
    raise DocumentDecodeError(f"Could not decode file: {filepath}")
