"""pyracantha: Python project scaffolding and requirements.txt synchronization."""

__version__ = "0.1.0"
