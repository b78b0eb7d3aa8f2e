"""
Gomfile and Gomfile.lock management for Go source trees.

gomkeeper records the external dependencies of a Go project and pins them
to the revisions present in its vendor directory:

    • Recursive import scanning into a sorted Gomfile
    • Group and platform aware selection of Gomfile entries
    • git / hg / bzr revision pinning into Gomfile.lock
    • Removal of VCS metadata from vendored trees after pinning
"""

from __future__ import annotations

from gomkeeper.__version__ import __version__

__author__ = "gomkeeper Contributors"
__license__ = "MIT"
__description__ = "Record and pin the Go dependencies of a source tree."

__all__ = [
    "__version__",
]
