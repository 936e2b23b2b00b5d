"""Shared utilities: retry engine and logging setup."""
