"""Service layer: build pipeline, freshness cache, and CLI-facing service.

Services may import from domain, infrastructure, adapters, and plugins.
They must never import from commands or output.
"""
