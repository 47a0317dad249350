"""Shared helpers: logging setup and subprocess invocation."""
