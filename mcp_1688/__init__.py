"""1688.com offer search exposed as a Model Context Protocol tool."""

__version__ = "0.1.0"
