"""
Task subsystem.

Components:
- task_models.py: data structures (TaskRecord, Priority, pending changes)
- extractor.py: checkbox line parsing
- query.py: fixed-vocabulary query filtering
- renderer.py: display fragments for the remote viewer
"""
