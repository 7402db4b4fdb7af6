from __future__ import annotations

import asyncio

from rich.console import Console
from rich.prompt import Prompt

from dirstream.services.fs import DEFAULT_FS, FileSystem, resolve_dir


class PromptPicker:
    """Asks for a directory on the terminal. An empty answer cancels."""

    def __init__(
        self,
        console: Console | None = None,
        prompt: str = "Directory to scan",
        fs: FileSystem = DEFAULT_FS,
    ) -> None:
        self._console = console
        self._prompt = prompt
        self._fs = fs

    async def pick(self) -> str | None:
        answer = await asyncio.to_thread(Prompt.ask, self._prompt, console=self._console, default="")
        answer = answer.strip()
        if not answer:
            return None
        return resolve_dir(answer, self._fs)


class StaticPicker:
    def __init__(self, path: str | None) -> None:
        self._path = path

    async def pick(self) -> str | None:
        return self._path
