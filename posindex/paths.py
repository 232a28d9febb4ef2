"""
Artifact locations for an index directory.

An index directory holds five tab-delimited text files. The forward indexer
writes the first three; the inverter reads doc_index.txt and writes the last
two.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import OutputDirectoryError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("output")

DOC_IDS_FILE = "docids.txt"
TERM_IDS_FILE = "termids.txt"
DOC_INDEX_FILE = "doc_index.txt"
TERM_INDEX_FILE = "term_index.txt"
TERM_INFO_FILE = "term_info.txt"


@dataclass(frozen=True)
class IndexPaths:
    """Paths to every artifact inside one index directory."""

    root: Path

    @property
    def doc_ids(self) -> Path:
        return self.root / DOC_IDS_FILE

    @property
    def term_ids(self) -> Path:
        return self.root / TERM_IDS_FILE

    @property
    def doc_index(self) -> Path:
        return self.root / DOC_INDEX_FILE

    @property
    def term_index(self) -> Path:
        return self.root / TERM_INDEX_FILE

    @property
    def term_info(self) -> Path:
        return self.root / TERM_INFO_FILE

    def all(self) -> list[Path]:
        return [self.doc_ids, self.term_ids, self.doc_index, self.term_index, self.term_info]


def prepare_output_dir(output_dir: Path) -> IndexPaths:
    """
    Make sure output_dir exists and holds no files from a previous run.
    Raises OutputDirectoryError if the directory cannot be created or a file
    in it cannot be removed.
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        try:
            output_dir.mkdir(parents=True)
        except OSError as e:
            raise OutputDirectoryError(f"Failed to create the directory: {output_dir}: {e}") from e
        logger.info("Created the directory: %s", output_dir)
    elif not output_dir.is_dir():
        raise OutputDirectoryError(f"Output path is not a directory: {output_dir}")
    else:
        for entry in output_dir.iterdir():
            if not entry.is_file():
                continue
            try:
                entry.unlink()
            except OSError as e:
                raise OutputDirectoryError(f"Failed to delete existing file: {entry}: {e}") from e
    return IndexPaths(output_dir)
