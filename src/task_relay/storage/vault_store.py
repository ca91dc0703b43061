# src/task_relay/storage/vault_store.py

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from ..errors import DocumentNotFoundError

logger = logging.getLogger(__name__)


class FileSystemDocumentStore:
    """
    DocumentStore over a directory of Markdown files (a "vault").

    - only *.md files are listed; hidden directories (".git", ".obsidian", ...) are skipped
    - writes are atomic (tmp file + os.replace) so a crash never leaves half a document
    - no locking: callers serialize access through AppState.gate
    """

    def __init__(self, root: str | Path, *, suffix: str = ".md") -> None:
        self._root = Path(root).expanduser().resolve()
        self._suffix = suffix
        if not self._root.is_dir():
            raise NotADirectoryError(f"Vault directory does not exist: {self._root}")
        logger.info("FileSystemDocumentStore ready root=%s", self._root)

    @property
    def root(self) -> Path:
        return self._root

    # ---- low-level helpers ----

    def _resolve(self, path: str) -> Path:
        rel = PurePosixPath((path or "").strip().lstrip("/"))
        if not rel.parts or ".." in rel.parts:
            raise ValueError(f"Invalid document path: {path!r}")
        return self._root.joinpath(*rel.parts)

    def _atomic_write(self, target: Path, text: str) -> None:
        tmp = target.with_name(target.name + ".tmp")
        tmp.write_text(text, encoding="utf-8", newline="")
        os.replace(tmp, target)

    # ---- DocumentStore ----

    def list_documents(self) -> list[str]:
        out: list[str] = []
        for p in sorted(self._root.rglob(f"*{self._suffix}")):
            rel = p.relative_to(self._root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if p.is_file():
                out.append(rel.as_posix())
        return out

    def read(self, path: str) -> str:
        target = self._resolve(path)
        try:
            # newline="": line endings are kept as-is so a write-back does not rewrite them.
            with open(target, encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            raise DocumentNotFoundError(path) from None

    def write(self, path: str, text: str) -> None:
        target = self._resolve(path)
        if not target.is_file():
            raise DocumentNotFoundError(path)
        self._atomic_write(target, text)

    def create(self, path: str, initial_text: str) -> str:
        target = self._resolve(path)
        if target.exists():
            raise FileExistsError(f"Document already exists: {path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        # "x" mode: fail instead of clobbering a document created in between.
        with open(target, "x", encoding="utf-8", newline="") as f:
            f.write(initial_text)
        logger.info("Created document %s", path)
        return PurePosixPath(*target.relative_to(self._root).parts).as_posix()

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except ValueError:
            return False

    def modified_time(self, path: str) -> float:
        try:
            return self._resolve(path).stat().st_mtime
        except FileNotFoundError:
            raise DocumentNotFoundError(path) from None
