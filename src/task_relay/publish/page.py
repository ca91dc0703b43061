# src/task_relay/publish/page.py

from __future__ import annotations

"""
Standalone HTML page for the remote viewer.

The page embeds the rendered task fragments and a small script that records
edits in the change log format:

    {"toggles": {id: true}, "postpones": {id: "YYYY-MM-DD"}, "newTasks": {key: text}}

Edits are kept in the browser's localStorage and can be exported as
pending_changes.json, which is the file JsonChangeLog consumes.

The password gate is a client-side convenience only, not access control.
"""

import json
from datetime import datetime
from html import escape
from typing import Any

CHANGE_LOG_FILENAME = "pending_changes.json"
STORAGE_KEY = "taskrelay_pending_changes"
PAGE_TITLE = "My Tasks"

_STYLES = """
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; background: #f5f5f5; color: #333; }
.container { max-width: 800px; margin: 0 auto; padding: 20px; }
h1 { margin-bottom: 10px; }
.last-updated { color: #888; font-size: 14px; margin-bottom: 20px; }
.task-input-section { background: #fff; padding: 15px; border-radius: 8px; margin-bottom: 20px; }
#new-task-input { padding: 8px; width: 70%; border: 1px solid #ddd; border-radius: 4px; }
button { padding: 6px 12px; margin-left: 5px; border: none; border-radius: 4px; background: #4a90d9; color: #fff; cursor: pointer; }
.task-group { background: #fff; border-radius: 8px; padding: 10px; margin-bottom: 20px; }
.task-count { color: #888; font-size: 13px; margin-bottom: 8px; }
.task-item { display: flex; align-items: center; padding: 8px 0; border-bottom: 1px solid #eee; }
.task-item.completed .task-text { text-decoration: line-through; color: #aaa; }
.task-text { flex: 1; margin-left: 8px; }
.task-metadata span { margin-left: 8px; font-size: 12px; color: #666; }
.task-actions { margin-left: 10px; }
.priority-highest, .priority-high { border-left: 3px solid #e74c3c; padding-left: 6px; }
.priority-medium { border-left: 3px solid #f39c12; padding-left: 6px; }
.priority-low { border-left: 3px solid #3498db; padding-left: 6px; }
.password-screen { display: flex; justify-content: center; align-items: center; height: 100vh; }
.password-container { background: #fff; padding: 30px; border-radius: 8px; text-align: center; }
.password-container input { display: block; margin: 15px auto; padding: 8px; width: 200px; }
@media (max-width: 600px) {
  #new-task-input { width: 100%; margin-bottom: 10px; }
  button { margin-left: 0; width: 100%; }
  .task-item { flex-direction: column; align-items: flex-start; }
  .task-actions { margin-left: 0; margin-top: 10px; }
}
"""

_SCRIPT = """
const STORAGE_KEY = __STORAGE_KEY__;
const PAGE_PASSWORD = __PAGE_PASSWORD__;
let pendingChanges = { toggles: {}, postpones: {}, newTasks: {} };

function checkPassword() {
  const input = document.getElementById('password-input');
  if (input.value === PAGE_PASSWORD) {
    document.getElementById('password-prompt').style.display = 'none';
    document.getElementById('main-content').style.display = 'block';
  } else {
    alert('Incorrect password');
    input.value = '';
  }
}

function savePendingChanges() {
  localStorage.setItem(STORAGE_KEY, JSON.stringify(pendingChanges));
}

function loadPendingChanges() {
  const saved = localStorage.getItem(STORAGE_KEY);
  if (saved) {
    pendingChanges = Object.assign({ toggles: {}, postpones: {}, newTasks: {} }, JSON.parse(saved));
  }
}

function toggleTask(taskId) {
  pendingChanges.toggles[taskId] = true;
  savePendingChanges();
  const checkbox = document.querySelector('input[data-task-id="' + CSS.escape(taskId) + '"]');
  if (checkbox) {
    checkbox.closest('.task-item').classList.toggle('completed', checkbox.checked);
  }
}

function postponeTask(taskId, days) {
  const newDate = new Date();
  newDate.setDate(newDate.getDate() + days);
  const dateString = newDate.toISOString().split('T')[0];
  pendingChanges.postpones[taskId] = dateString;
  savePendingChanges();
  alert('Task postponed to ' + dateString + '. Will apply on next sync.');
}

function addNewTask() {
  const input = document.getElementById('new-task-input');
  const taskText = input.value.trim();
  if (taskText) {
    pendingChanges.newTasks[String(Date.now())] = taskText;
    savePendingChanges();
    input.value = '';
    alert('Task queued for next sync!');
  }
}

function exportPendingChanges() {
  const blob = new Blob([JSON.stringify(pendingChanges, null, 2)], { type: 'application/json' });
  const link = document.createElement('a');
  link.href = URL.createObjectURL(blob);
  link.download = __CHANGE_LOG_FILENAME__;
  link.click();
  pendingChanges = { toggles: {}, postpones: {}, newTasks: {} };
  savePendingChanges();
}

document.addEventListener('DOMContentLoaded', function () {
  loadPendingChanges();
  const passwordInput = document.getElementById('password-input');
  if (passwordInput) {
    passwordInput.addEventListener('keypress', function (e) { if (e.key === 'Enter') checkPassword(); });
  }
  const taskInput = document.getElementById('new-task-input');
  if (taskInput) {
    taskInput.addEventListener('keypress', function (e) { if (e.key === 'Enter') addNewTask(); });
  }
});
"""


def _js_string(value: str) -> str:
    # json.dumps gives a valid JS string literal; "</" is split so it cannot close the <script> tag.
    return json.dumps(value).replace("</", "<\\/")


def build_script(settings: Any) -> str:
    return (
        _SCRIPT.replace("__STORAGE_KEY__", _js_string(STORAGE_KEY))
        .replace("__PAGE_PASSWORD__", _js_string(str(getattr(settings, "page_password", "") or "")))
        .replace("__CHANGE_LOG_FILENAME__", _js_string(CHANGE_LOG_FILENAME))
    )


def _password_prompt() -> str:
    return (
        '<div id="password-prompt" class="password-screen">\n'
        '  <div class="password-container">\n'
        "    <h2>Enter Password</h2>\n"
        '    <input type="password" id="password-input" placeholder="Password" />\n'
        '    <button onclick="checkPassword()">Enter</button>\n'
        "  </div>\n"
        "</div>"
    )


def build_page(content: str, settings: Any, *, now: datetime | None = None) -> str:
    """Wrap rendered task content into a complete HTML document."""
    has_password = bool(getattr(settings, "page_password", ""))
    title = escape(PAGE_TITLE)
    updated = (now or datetime.now().astimezone()).strftime("%Y-%m-%d %H:%M")
    hidden = ' style="display:none"' if has_password else ""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>{_STYLES}</style>
</head>
<body>
{_password_prompt() if has_password else ""}
<div id="main-content"{hidden}>
  <div class="container">
    <h1>{title}</h1>
    <div class="last-updated">Last updated: {updated}</div>
    <div class="task-input-section">
      <h3>Add New Task</h3>
      <input type="text" id="new-task-input" placeholder="Enter a new task..." />
      <button onclick="addNewTask()">Add Task</button>
      <button onclick="exportPendingChanges()">Export changes</button>
    </div>
    <div class="content">
{content}
    </div>
  </div>
</div>
<script>{build_script(settings)}</script>
</body>
</html>
"""
