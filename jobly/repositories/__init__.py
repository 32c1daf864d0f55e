"""Persistence operations for companies and jobs."""
