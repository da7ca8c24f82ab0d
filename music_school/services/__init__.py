"""Service layer: API-backed operations, form validation and reconciliation."""
