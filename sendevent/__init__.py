"""Assemble Sentry events from the command line and dispatch them."""

__version__ = "1.0.0"
