# src/task_relay/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the document store and the publish transport swappable and makes testing easier.
"""

from typing import Protocol


class DocumentStore(Protocol):
    """
    Whole-document text storage (a folder of Markdown notes).

    Paths are POSIX-style strings relative to the store root, e.g. "Daily Notes/2024-01-10.md".
    read()/modified_time() raise DocumentNotFoundError for missing documents,
    create() raises FileExistsError when the document already exists.
    """

    def list_documents(self) -> list[str]: ...
    def read(self, path: str) -> str: ...
    def write(self, path: str, text: str) -> None: ...
    def create(self, path: str, initial_text: str) -> str: ...
    def exists(self, path: str) -> bool: ...
    def modified_time(self, path: str) -> float: ...


class Publisher(Protocol):
    """
    Publish transport: pushes a complete HTML page somewhere the remote viewer can load it.

    Raises PublishError on transport failure.
    """

    def push(self, content: str) -> None: ...
