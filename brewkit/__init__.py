"""brewkit - Homebrew as an app store, driven through a serial command queue."""

__version__ = "0.1.0"
