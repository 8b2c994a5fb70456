"""Agents backing the completion service."""
