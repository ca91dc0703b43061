"""
Ports, application state and the top-level publish/sync operations.
"""
