"""Core type definitions."""

from typing import NewType

# Canonical document identifier (e.g., "index", "guides/setup")
# Distinct from filesystem Path and URL paths to catch type mismatches
Slug = NewType("Slug", str)

# Route path served to the browser (e.g., "/", "/guides/setup#install")
URLPath = NewType("URLPath", str)
