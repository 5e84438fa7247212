"""
Domain layer containing the go-live orchestration logic.

Submodules:
- live: Go-live lifecycle, settings, auth and error routing.
"""
