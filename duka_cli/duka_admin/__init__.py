"""Form-driven schema and table management."""
