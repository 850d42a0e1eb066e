"""Read the input table into plain text records."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .errors import SourceError

logger = logging.getLogger(__name__)


def read_rows(path: str | Path) -> list[dict[str, str]]:
    """Read a delimited file with a header row into ``dict[str, str]`` records.

    Every cell is read as text and empty cells stay ``""``; interpreting
    the values is the validator's job. Raises ``SourceError`` when the
    file is missing or cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceError(f"Input file not found: {path}", context={"path": str(path)})

    try:
        df = pd.read_csv(
            path,
            dtype=str,
            index_col=False,  # trailing delimiters must not shift cells onto an index
            keep_default_na=False,
            skipinitialspace=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        logger.warning("Input file %s is empty", path)
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise SourceError(f"Failed to read {path}: {exc}", context={"path": str(path)}) from exc

    df.columns = [str(c).strip() for c in df.columns]
    records = df.to_dict(orient="records")
    logger.debug("Read %d row(s) from %s", len(records), path)
    return records
