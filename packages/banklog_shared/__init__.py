"""Shared infrastructure (HTTP, logging, configuration) for banklog packages."""
