"""Domain layer — project model, manifests, versions and build state.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
