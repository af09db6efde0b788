"""Resolution of request paths against an optional root directory."""

from __future__ import annotations

import os


class PathError(ValueError):
    """Raised when a path is outside the root or cannot be checked."""


class PathProcessor:
    """Resolves paths relative to a root directory, if one is configured."""

    def __init__(self, root_path: str = ""):
        self.root_path = root_path

    def process_path(self, path: str) -> str:
        """Join relative paths to the root; check absolute ones lie inside it.

        Without a root the path is returned unchanged.
        """
        if not self.root_path:
            return path

        root = os.path.abspath(self.root_path)
        if os.path.isabs(path):
            try:
                rel = os.path.relpath(path, root)
            except ValueError as exc:
                raise PathError(f"path is outside root directory: {exc}") from exc
            if rel.startswith(".."):
                raise PathError("path is outside root directory")
            return path

        return os.path.normpath(os.path.join(root, path))

    def validate_path(self, path: str) -> None:
        """Raise PathError if the path is disallowed or cannot be checked.

        A path that does not exist yet is accepted.
        """
        processed = self.process_path(path)
        try:
            os.stat(processed)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise PathError(f"error checking path: {exc}") from exc