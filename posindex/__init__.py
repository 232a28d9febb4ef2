"""Positional inverted index package."""

from .posting import TermInfo, decode_term_line, encode_term_line
from .index_builder import ForwardIndexer, build_all, build_forward_index_from_directory, write_forward_index
from .inverter import IndexInverter
from .index_reader import IndexReader
from .stopwords import load_stop_words
from .tokenizer import normalize, tokenize, extract_document_text
