"""Core type definitions."""

from typing import NewType

# Document-root-relative URL path without leading slash (e.g., "notes/hello")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)
