"""
Application Modules.

- backend/: API, realtime notifications, database, background tasks and events
"""
