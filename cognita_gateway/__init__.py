"""Cognita AI gateway: multi-provider chat proxy for the Cognita app."""

__version__ = "1.0.0"
