"""Run log listing the titles whose identifier changed in a run."""

import os

from .errors import StorageError
from .models import ReconcileResult

NOT_ADMITTED = "-"


def format_run_log(result: ReconcileResult) -> str:
    """Render one ``title identifier`` line per changed title.

    Titles turned away by the size bound have no stored identifier and are
    written with ``-`` in its place.
    """
    lines = [
        f"{title} {result.identifiers.get(title, NOT_ADMITTED)}\n"
        for title in result.changed_titles
    ]
    return "".join(lines)


def write_run_log(path: str | os.PathLike, result: ReconcileResult) -> None:
    """Overwrite the run log at path.

    Raises:
        StorageError: If the log cannot be written
    """
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(format_run_log(result))
    except OSError as e:
        raise StorageError(f"Failed to write run log {path}: {e}") from e
