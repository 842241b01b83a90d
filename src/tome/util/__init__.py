"""Shared utilities for tome."""
