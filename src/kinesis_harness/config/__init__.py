"""Configuration for the harness."""
