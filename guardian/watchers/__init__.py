"""Per-chain watchers."""
