"""
Shared module package.

Cross-cutting HTTP concerns: error mapping, secure headers,
rate limiting and logging setup.
"""
