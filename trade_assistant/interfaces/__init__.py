"""
Interfaces layer package.

FastAPI routers and Pydantic schemas. Routes validate input, call one
use case, and turn its result (or its domain error) into a response.
"""
