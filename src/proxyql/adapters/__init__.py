"""Framework adapters for proxyql."""
