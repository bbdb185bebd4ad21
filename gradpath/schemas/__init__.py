"""
Pydantic schemas for domain records and API request/response validation.

All FastAPI endpoints MUST use strict Pydantic models with explicit types.
JSON uses camelCase field names to match the frontend.
"""
