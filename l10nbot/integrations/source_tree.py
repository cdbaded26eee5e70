from __future__ import annotations

from typing import Protocol, Sequence

from l10nbot.models.resources import TreeItem


class SourceTreeProvider(Protocol):
    """Repository access consumed by the scanner and publisher."""

    async def list_tree(self, ref: str) -> Sequence[TreeItem]: ...

    async def read_file(self, path: str, ref: str) -> str: ...

    async def write_file(self, path: str, content: str, message: str, branch: str) -> None: ...

    async def create_branch(self, new_name: str, base_ref: str) -> None: ...

    async def open_pull_request(self, title: str, body: str, head: str, base: str) -> str: ...

    async def list_branches(self) -> list[str]: ...
