"""
Domain layer package.

Pure trading logic: entities, fixed-point conversion, payload builders
and port interfaces. No framework imports, no IO, no side effects.
"""
