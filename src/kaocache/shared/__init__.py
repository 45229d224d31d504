"""Shared building blocks: errors, logging, constants and types."""
