"""Project portal backend: multi-tenant project management API."""
