from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from l10nbot.core.errors import BranchError, FileMissingError, FileReadError, PullRequestError, WriteError
from l10nbot.models.resources import TreeItem


logger = logging.getLogger(__name__)


class LocalSourceTree:
    """Source-tree provider over a checkout on the local filesystem.

    Refs are ignored: the working tree is read as-is. Writes land directly in
    the checkout; branches and pull requests are not supported.
    """

    _IGNORED_DIRS = frozenset({".git", ".gradle", ".idea", "build", "node_modules"})

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()
        if not self._root.is_dir():
            raise ValueError(f"Repository root does not exist: {self._root}")

    @property
    def root(self) -> Path:
        return self._root

    async def list_tree(self, ref: str) -> list[TreeItem]:
        return await asyncio.to_thread(self._walk)

    async def read_file(self, path: str, ref: str) -> str:
        target = self._resolve(path)
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except FileNotFoundError as exc:
            raise FileMissingError(path) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(path, f"Failed to read {path}: {exc}") from exc

    async def write_file(self, path: str, content: str, message: str, branch: str) -> None:
        try:
            target = self._resolve(path)
        except FileReadError as exc:
            raise WriteError(path, str(exc)) from exc
        try:
            await asyncio.to_thread(self._write, target, content)
        except OSError as exc:
            raise WriteError(path, f"Failed to write {path}: {exc}") from exc
        logger.info("Wrote %s (%s)", path, message)

    async def create_branch(self, new_name: str, base_ref: str) -> None:
        raise BranchError("Local checkouts do not support creating branches.")

    async def open_pull_request(self, title: str, body: str, head: str, base: str) -> str:
        raise PullRequestError("Local checkouts do not support pull requests.")

    async def list_branches(self) -> list[str]:
        raise BranchError("Local checkouts do not expose branches.")

    def _walk(self) -> list[TreeItem]:
        items: list[TreeItem] = []
        for candidate in sorted(self._root.rglob("*")):
            relative = candidate.relative_to(self._root)
            if self._IGNORED_DIRS.intersection(relative.parts):
                continue
            items.append(
                TreeItem(
                    path=relative.as_posix(),
                    type="tree" if candidate.is_dir() else "blob",
                )
            )
        return items

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if self._root != target and self._root not in target.parents:
            raise FileReadError(path, f"Path escapes repository root: {path}")
        return target

    @staticmethod
    def _write(target: Path, content: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
