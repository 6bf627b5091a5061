"""Shared exceptions, logging and metrics for the promotion engine."""
