"""Jobly: jobs and companies backed by a relational database."""

__version__ = "0.1.0"
