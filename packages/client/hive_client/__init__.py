"""
Volunteer Hive API client

Cursor-paginated access to events, members, resources and audit logs of a
volunteer organization, plus derivation of a user's per-organization
permissions.
"""

__version__ = "0.1.0"
