# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets (the page password, git credentials in the repo URL). Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKRELAY_APP_NAME": "App name used in logs (default: task-relay).",
    "TASKRELAY_LOG_LEVEL": "Console logging level (default: INFO).",
    # Vault
    "TASKRELAY_VAULT_DIR": "Directory holding the Markdown notes (default: current directory).",
    "TASKRELAY_PUBLISH_PAGE_PATH": "Note whose ```tasks blocks get published (default: Daily Tasks.md).",
    "TASKRELAY_INTAKE_FOLDER": "Folder for daily notes that receive new tasks (default: Daily Notes).",
    # Sync
    "TASKRELAY_SYNC_INTERVAL": "Minutes between syncs in `task-relay run` (default: 60, 0 disables).",
    # Published page
    "TASKRELAY_PAGE_PASSWORD": "Optional password/PIN shown as a gate on the published page.",
    # Publish transport
    "TASKRELAY_PUBLISH_DIR": "Write index.html into this directory instead of pushing to git.",
    "TASKRELAY_GIT_REPO_URL": "Git repository that serves the page (e.g. GitHub Pages).",
    "TASKRELAY_GIT_BRANCH": "Branch to push to (default: main).",
    "TASKRELAY_LOCAL_REPO_PATH": "Local clone used for publishing (default: <data_dir>/publish-repo).",
    "TASKRELAY_GIT_TIMEOUT_SECONDS": "Timeout for each git call (default: 60).",
    # Paths (gitignored)
    "TASKRELAY_DATA_DIR": "Local data directory for logs and state (default: .local/task-relay).",
    "TASKRELAY_CHANGE_LOG_PATH": "Pending changes JSON written by the viewer (default: <data_dir>/pending_changes.json).",
    "TASKRELAY_WATERMARK_PATH": "Last-sync timestamp file (default: <data_dir>/sync_state.json).",
}
