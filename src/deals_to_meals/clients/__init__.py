"""HTTP clients for third-party APIs."""
