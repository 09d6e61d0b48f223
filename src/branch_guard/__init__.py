"""Branch-targeting policy for pull requests."""

__version__ = "1.0.0"
