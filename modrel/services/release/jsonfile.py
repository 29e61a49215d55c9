"""JSON files kept by the pipeline: the mod descriptor and the change note store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from modrel.core.result import Err, Ok, Result
from modrel.services.release.errors import ReleaseError

__all__ = ["write_json"]


def write_json(path: Path, payload: object, *, what: str) -> Result[None, ReleaseError]:
    """Write ``payload`` as 4-space indented JSON with a trailing newline.

    The text lands in a hidden sibling first and is renamed over ``path``,
    so an interrupted run leaves the previous file whole. ``what`` names the
    file in the error message.
    """
    text = json.dumps(payload, indent=4) + "\n"
    tmp: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp = Path(handle.name)
            handle.write(text)
        os.replace(tmp, path)
    except OSError as e:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
        return Err(
            ReleaseError(kind="io_failed", message=f"failed to write {what}: {e}", hint=str(path))
        )
    return Ok(None)
