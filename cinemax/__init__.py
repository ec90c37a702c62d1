"""
Shared Cinemax library code.

This package holds the provider clients, the canonical movie model and the
search/trailer orchestration reused by:
- the FastAPI app in `api/`
- CLI scripts in `scripts/`

App entrypoints should live outside this package and import from `cinemax`
rather than the other way around.
"""
