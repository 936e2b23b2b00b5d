"""AWS clients used by the harness."""
