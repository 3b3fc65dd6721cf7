"""Domain layer — capabilities, rules, and wrappers.

This layer depends only on stdlib and pydantic.
It must never import from infrastructure, config, or the CLI at module level.
"""
