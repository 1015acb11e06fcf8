"""
Shared utilities for the Book Records API.
"""
