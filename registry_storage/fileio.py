"""Local file helpers."""

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def save_to(chunks: Iterable[bytes], save_path: str | Path) -> int:
    """Stream byte chunks to a file, overwriting it. Returns bytes written.

    A partially written file is removed before the error propagates.
    """
    path = Path(save_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with open(path, "wb") as f:
        try:
            for chunk in chunks:
                if chunk:
                    f.write(chunk)
                    written += len(chunk)
        except OSError:
            f.close()
            path.unlink(missing_ok=True)
            raise

    logger.debug("Saved %d bytes to %s", written, path)
    return written
