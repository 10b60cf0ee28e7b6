"""Core infrastructure: configuration, logging, request context and jobs."""
