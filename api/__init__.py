"""
FastAPI REST API for book records.

This package provides:
- Create, list, fetch, update and delete operations on books
- MongoDB persistence through Motor
- Uniform {"message": ...} error responses
"""
