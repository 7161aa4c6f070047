"""Batch job that looks up member ages from telecom TCRS services and stores them."""

__version__ = "0.1.0"

__all__ = ["ages", "batch", "cli", "config", "dmrs", "formats", "process", "tcrs"]