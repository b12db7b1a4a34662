from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ..errors import RequiredFileMissing

logger = logging.getLogger(__name__)


def install_file(src: str | Path, dst: str | Path, *, mode: int = 0o644, dry_run: bool = False) -> None:
    """Copy src to dst, creating parent directories.

    The content is written to a temporary file next to dst and renamed into
    place, so dst is either the old file or the complete new one.
    """

    s = Path(src)
    d = Path(dst)
    if not s.is_file():
        raise RequiredFileMissing(str(s))

    if dry_run:
        logger.info("Would install %s -> %s", s, d)
        return

    d.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{d.name}.", dir=str(d.parent))
    try:
        with os.fdopen(fd, "wb") as out:
            out.write(s.read_bytes())
            out.flush()
            os.fsync(out.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, d)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
