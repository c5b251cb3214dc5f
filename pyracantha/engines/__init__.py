"""Engines: dependency scanning and project scaffolding."""
