"""Core application components: configuration, errors, middleware, lifecycle."""
