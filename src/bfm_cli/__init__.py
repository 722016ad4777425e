"""bfm - keep a Brewfile in sync with Homebrew package metadata."""

__version__ = "0.3.0"
