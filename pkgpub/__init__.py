"""pkgpub - publish package releases and documentation to a package registry."""

__version__ = "0.3.0"
