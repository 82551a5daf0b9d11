"""File installation helpers."""

from __future__ import annotations

import os
import shutil
import tempfile
from typing import BinaryIO

from buildtree.logging import Logger


def install(
    destination: str,
    source_name: str,
    executable: bool = False,
    logger: Logger | None = None,
) -> None:
    """Install a file.

    A destination ending in "/" is a directory; the file keeps its base name.
    """
    dest_name = destination
    if dest_name.endswith("/"):
        dest_name = os.path.join(dest_name, os.path.basename(source_name))

    with open(source_name, "rb") as source:
        install_data(dest_name, source, executable, logger=logger)


def install_data(
    dest_name: str,
    source: BinaryIO,
    executable: bool = False,
    logger: Logger | None = None,
) -> None:
    """Write data to a file atomically.

    The data goes to a hidden temporary file next to the destination, which is
    renamed over the destination once it is complete. The temporary file is
    removed if anything fails.
    """
    if logger:
        logger.info(f"Installing {dest_name}", markup=False, highlight=False)

    directory = os.path.dirname(dest_name) or "."
    os.makedirs(directory, mode=0o755, exist_ok=True)

    prefix = os.path.basename(dest_name) + "."
    if not prefix.startswith("."):
        prefix = "." + prefix

    fd, temp_name = tempfile.mkstemp(prefix=prefix, dir=directory)
    ok = False
    try:
        with os.fdopen(fd, "wb") as dest:
            shutil.copyfileobj(source, dest)
            os.fchmod(dest.fileno(), 0o755 if executable else 0o644)
            dest.flush()
            os.fsync(dest.fileno())
        os.replace(temp_name, dest_name)
        ok = True
    finally:
        if not ok:
            try:
                os.unlink(temp_name)
            except FileNotFoundError:
                pass
