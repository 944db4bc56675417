from __future__ import annotations

import os


def scriptPath(*pathSegs: str) -> str:
    # Paths are relative to the package directory.
    startPath = os.path.dirname(os.path.realpath(__file__))
    path = os.path.join(startPath, *pathSegs)
    return path
