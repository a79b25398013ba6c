"""
Path helpers. Paths are dot-separated, the same notation Settings.get() uses.
"""

from typing import Any

SEPARATOR = "."


class Paths:

    @staticmethod
    def create(*segments: Any) -> str:
        """Join path segments, skipping empty ones: create("", "a", 0) == "a.0"."""
        parts = [str(segment) for segment in segments if segment is not None and str(segment) != ""]
        return SEPARATOR.join(parts)

    @staticmethod
    def split(path: str) -> list[str]:
        if not path:
            return []
        return path.split(SEPARATOR)
