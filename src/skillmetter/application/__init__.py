"""Application layer: profile acquisition and comparison orchestration."""
