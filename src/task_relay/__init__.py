"""
task-relay: publish Markdown checkbox tasks to a static page and sync remote edits back.
"""

__version__ = "0.1.0"
