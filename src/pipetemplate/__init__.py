"""
pipetemplate — Instantiate parameterized pipeline templates into a cluster namespace.

Fetch → Substitute → Expand/Map → Validate → Create.
"""

__version__ = "0.1.0"
