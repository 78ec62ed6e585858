"""Deployment config generator — image-change driven config versioning."""

__version__ = "0.1.0"
