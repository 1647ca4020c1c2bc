"""HTTP layer: app factory, response envelope and service providers."""
