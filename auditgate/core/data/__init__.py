"""Static data — tool catalogs, default whitelist and tool sources."""
