"""
Core components of the content engine.

Leaves first: slugs, schema, validation, entries, workflow.
"""
