"""click command groups registered by auditgate.main."""
