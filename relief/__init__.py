"""Data core of a disaster relief coordination service."""
