"""
Pydantic schemas for API request/response validation.

Provides data models for authentication and project endpoints.
"""
