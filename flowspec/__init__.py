"""Durations, timeouts, retry policies, run and raise configurations and workflow metadata for serverless workflow definitions."""

__version__ = "0.1.0"

__all__ = ["durations", "raising", "retry", "run", "validation", "workflow"]