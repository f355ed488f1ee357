"""Aegis: deterministic drone swarm simulation engine."""

__version__ = "0.1.0"
