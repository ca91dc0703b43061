# tests/test_vault_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from task_relay.errors import DocumentNotFoundError
from task_relay.storage.vault_store import FileSystemDocumentStore

from .conftest import write_doc


def test_missing_root_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(NotADirectoryError):
        FileSystemDocumentStore(tmp_path / "nope")


def test_lists_markdown_and_skips_hidden(vault: Path, store: FileSystemDocumentStore) -> None:
    write_doc(vault, "b.md", "")
    write_doc(vault, "Daily Notes/2024-01-01.md", "")
    write_doc(vault, ".obsidian/workspace.md", "")
    write_doc(vault, "image.png", "")

    assert store.list_documents() == ["Daily Notes/2024-01-01.md", "b.md"]


def test_read_write_preserve_text(vault: Path, store: FileSystemDocumentStore) -> None:
    write_doc(vault, "a.md", "x")

    store.write("a.md", "line1\r\nline2\n")

    assert store.read("a.md") == "line1\r\nline2\n"
    assert not (vault / "a.md.tmp").exists()


def test_missing_documents(store: FileSystemDocumentStore) -> None:
    with pytest.raises(DocumentNotFoundError):
        store.read("nope.md")
    with pytest.raises(DocumentNotFoundError):
        store.write("nope.md", "x")
    with pytest.raises(DocumentNotFoundError):
        store.modified_time("nope.md")
    assert not store.exists("nope.md")


def test_create_makes_folders_and_refuses_to_overwrite(vault: Path, store: FileSystemDocumentStore) -> None:
    created = store.create("Daily Notes/2024-01-01.md", "# hi\n")

    assert created == "Daily Notes/2024-01-01.md"
    assert store.exists(created)
    assert (vault / "Daily Notes" / "2024-01-01.md").read_text("utf-8") == "# hi\n"
    with pytest.raises(FileExistsError):
        store.create(created, "again")


def test_paths_cannot_escape_the_vault(store: FileSystemDocumentStore) -> None:
    with pytest.raises(ValueError):
        store.read("../secret.md")
    with pytest.raises(ValueError):
        store.create("", "x")
    assert not store.exists("../secret.md")
