"""Core - configuration, value objects, errors and the template."""
