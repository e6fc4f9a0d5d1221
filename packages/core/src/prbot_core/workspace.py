from __future__ import annotations

import logging
import shutil
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


@contextmanager
def workspace(root: str | None = None) -> Iterator[str]:
    """Yield a fresh private directory and remove it on every exit path."""
    path = Path(root or tempfile.gettempdir()) / f"pr-review-{uuid.uuid4()}"
    path.mkdir(parents=True)
    logger.debug("Created workspace %s", path)
    try:
        yield str(path)
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed workspace %s", path)
