"""HTTP API gateway routing JSON calls to REST services described in .svc files."""

__version__ = "0.1.0"