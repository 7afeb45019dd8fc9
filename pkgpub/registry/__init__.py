"""Registry API access: HTTP transport, gateway operations, public URLs."""
