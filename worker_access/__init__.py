"""Roster audit that revokes Drive access for lapsed workers and archives their rows."""

__version__ = "0.1.0"
