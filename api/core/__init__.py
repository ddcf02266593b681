"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (settings, DB
wiring, the media-store client, error responses). Feature-specific SQL and
business logic stay in the feature package (e.g. `projects/`).
"""
