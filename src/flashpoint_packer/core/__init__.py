"""Core infrastructure: configuration, errors, logging and the catalogue source."""
