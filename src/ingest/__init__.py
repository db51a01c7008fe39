"""Export ingestion pipeline.

This module reads dropped export files and normalizes their payload.
It prepares the session state handed to the presentation layer.
"""
