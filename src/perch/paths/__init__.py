"""Navigation paths: ordered route containers."""

from perch.paths.base import PathKey, StackMutable, StackPath
from perch.paths.indexed import IndexedStackPath
from perch.paths.navigation import NavigationPath

__all__ = [
    "IndexedStackPath",
    "NavigationPath",
    "PathKey",
    "StackMutable",
    "StackPath",
]
