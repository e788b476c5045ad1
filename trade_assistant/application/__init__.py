"""
Application layer package.

Use cases orchestrating the domain: one class, one async ``execute``.
Depends on domain ports only, never on infrastructure.
"""
