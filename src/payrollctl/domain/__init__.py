"""Domain layer — types, field rules, entity schemas, and the validation engine.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
