"""auditgate — safety-gated runner for Linux audit tools."""

__version__ = "0.1.0"
