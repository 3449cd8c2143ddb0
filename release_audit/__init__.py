"""Cross-check a component's version across its docs page, manifest and readme badge."""

from .version import __version__

__all__ = ["__version__"]
