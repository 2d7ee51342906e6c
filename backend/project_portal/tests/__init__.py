"""
Test package for the project portal backend.

This package contains test suites for:
- Registration, login and token handling
- Client (tenant) isolation of projects
- Role guards and the project write policy
- Project membership endpoints
"""
