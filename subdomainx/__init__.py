"""Subdomain reconnaissance building blocks: result types, checkpoints, httpx and smap scanning, tool checks and utilities."""

__version__ = "1.4.1"