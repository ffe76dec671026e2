"""Services subpackage - orchestration of catalog, profile and adjustment operations."""
