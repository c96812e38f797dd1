"""Unique output file names."""

import uuid
from pathlib import Path
from typing import Union


def unique_filename(directory: Union[str, Path], suffix: str = "") -> str:
    """Return a collision free path under ``directory`` ending with ``suffix``."""
    return str(Path(directory) / f"{uuid.uuid4().hex}{suffix}")
