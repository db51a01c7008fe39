"""Session storage layer.

This module keeps the last ingested profile, its asset handles,
and the source file date for the lifetime of a session.
"""
