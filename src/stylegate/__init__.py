"""stylegate: lint-gated stylesheet build tasks."""

__version__ = "0.3.0"
