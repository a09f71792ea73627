"""
File decoding adapter.
Reads uploaded CSV and Excel files into raw row mappings with pandas.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import IO, Any

import pandas as pd

from ..core.exceptions import FileDecodeError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {".csv", ".txt"}
EXCEL_EXTENSIONS = {".xlsx"}


def _read_frame(source: Any, extension: str) -> pd.DataFrame:
    # Every cell is read as text so the normalizer sees the file's own formatting
    if extension in CSV_EXTENSIONS:
        return pd.read_csv(source, dtype=str, keep_default_na=False)
    return pd.read_excel(source, dtype=str, keep_default_na=False)


def frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame into row dicts, with blank cells as empty strings."""
    df = df.astype(object).where(pd.notna(df), "")
    df.columns = [str(column).strip() for column in df.columns]
    return df.to_dict(orient="records")


def load_rows(
    source: str | Path | bytes | IO[bytes],
    filename: str | None = None,
) -> list[dict[str, Any]]:
    """
    Decode an uploaded file into raw rows.

    Args:
        source: Path, raw bytes, or a binary file object (e.g. a Streamlit upload)
        filename: Name used to pick the reader when ``source`` is not a path

    Returns:
        One dict per data row, keyed by header

    Raises:
        UnsupportedFileTypeError: If the extension is not CSV or xlsx
        FileDecodeError: If the file cannot be read
    """
    if filename is None:
        filename = str(source) if isinstance(source, (str, Path)) else getattr(source, "name", "")
    extension = Path(filename).suffix.lower()
    if extension not in CSV_EXTENSIONS | EXCEL_EXTENSIONS:
        raise UnsupportedFileTypeError(
            message="Unsupported file format. Please upload CSV or XLSX.",
            details={"filename": filename},
        )

    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        df = _read_frame(source, extension)
    except pd.errors.EmptyDataError:
        logger.warning("File %s has no data", filename)
        return []
    except (
        ValueError,
        OSError,
        ImportError,
        pd.errors.ParserError,
        zipfile.BadZipFile,
    ) as e:
        raise FileDecodeError(
            message=f"Error parsing file: {e}",
            details={"filename": filename, "error_type": type(e).__name__},
        ) from e

    rows = frame_to_rows(df)
    logger.info("Decoded %d rows from %s", len(rows), filename)
    return rows
