"""
Tekton CD tooling.

Applies the Tekton pipeline, triggers and EventListener from .tekton/ to a
cluster in dependency order and reports their status.
"""

__version__ = "0.1.0"
