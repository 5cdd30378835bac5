"""Minerva CMS: core controllers that add-on libraries can bridge into."""

__version__ = "1.0.0"
