# src/task_relay/publish/publishers.py

from __future__ import annotations

import logging
import os
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import PublishError

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


def _atomic_write(target: Path, content: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, target)


class DirectoryPublisher:
    """Writes index.html into a local directory (a web root, a synced folder, ...)."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory).expanduser()

    def push(self, content: str) -> None:
        target = self._dir / INDEX_FILENAME
        try:
            _atomic_write(target, content)
        except OSError as e:
            raise PublishError(f"Failed to write {target}: {e}") from e
        logger.info("Published %d bytes to %s", len(content), target)


class GitPublisher:
    """
    Publishes index.html through a git repository (e.g. one served by GitHub Pages).

    push():
    - clones repo_url into local_repo_path when missing
    - pulls the branch
    - writes index.html
    - commits and pushes only when the file changed

    Every git call has a timeout; any failure becomes PublishError.
    """

    def __init__(
        self,
        repo_url: str,
        local_repo_path: str | Path,
        *,
        branch: str = "main",
        timeout_seconds: float = 60.0,
    ) -> None:
        if not repo_url or not repo_url.strip():
            raise ValueError("repo_url is required")
        self._repo_url = repo_url.strip()
        self._repo_path = Path(local_repo_path).expanduser()
        self._branch = branch or "main"
        self._timeout = max(1.0, float(timeout_seconds))

    def _git(self, *args: str, cwd: Path | None = None) -> str:
        cmd = ["git", *args]
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(cwd or self._repo_path),
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise PublishError(f"`{' '.join(cmd)}` failed: {(e.stderr or e.stdout or '').strip()}") from e
        except subprocess.TimeoutExpired as e:
            raise PublishError(f"`{' '.join(cmd)}` timed out after {self._timeout:.0f}s") from e
        except OSError as e:
            raise PublishError(f"Cannot run git: {e}") from e
        return proc.stdout

    def push(self, content: str) -> None:
        if not (self._repo_path / ".git").is_dir():
            logger.info("Cloning %s into %s", self._repo_url, self._repo_path)
            self._repo_path.parent.mkdir(parents=True, exist_ok=True)
            self._git("clone", self._repo_url, str(self._repo_path), cwd=self._repo_path.parent)

        self._git("pull", "origin", self._branch)

        try:
            _atomic_write(self._repo_path / INDEX_FILENAME, content)
        except OSError as e:
            raise PublishError(f"Failed to write {INDEX_FILENAME}: {e}") from e

        if not self._git("status", "--porcelain", INDEX_FILENAME).strip():
            logger.info("No changes to publish")
            return

        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        self._git("add", INDEX_FILENAME)
        self._git("commit", "-m", f"Update tasks - {stamp}")
        self._git("push", "origin", self._branch)
        logger.info("Tasks published to %s (%s)", self._repo_url, self._branch)


def create_publisher(settings: Any) -> DirectoryPublisher | GitPublisher | None:
    """Pick the publisher from settings: publish_dir wins over git_repo_url; None if neither is set."""
    publish_dir = getattr(settings, "publish_dir", None)
    if publish_dir:
        return DirectoryPublisher(publish_dir)

    repo_url = str(getattr(settings, "git_repo_url", "") or "").strip()
    if repo_url:
        return GitPublisher(
            repo_url,
            getattr(settings, "local_repo_path", Path(".local/task-relay/publish-repo")),
            branch=str(getattr(settings, "git_branch", "main") or "main"),
            timeout_seconds=float(getattr(settings, "git_timeout_seconds", 60.0) or 60.0),
        )

    return None
