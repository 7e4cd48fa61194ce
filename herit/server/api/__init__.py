"""HTTP API routers for the Herit server."""
