"""
Detecting the client's own version.

The codebase does not contain the version directly: it is taken from
the package metadata of the installed distribution.

The version is determined only once at startup when the code is loaded.
"""
import importlib.metadata
from typing import Optional

version: Optional[str] = None

try:
    name, *_ = __name__.split('.')  # usually "kubeclient", unless renamed/forked.
    version = importlib.metadata.version(name)
except importlib.metadata.PackageNotFoundError:
    pass  # not installed, e.g. used from a source tree.
