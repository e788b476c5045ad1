"""
Cross-cutting concerns shared by every layer above the domain:
error-to-HTTP mapping, security headers, rate limiting and logging setup.
"""
