"""
Shared, cross-cutting code for the API.

`core/` holds the building blocks every feature needs: settings, the database
handle, error types and logging setup. Feature-specific SQL and business rules
live in the feature package (e.g. `blog/`).
"""
