"""
Shared error handling package.

Translates trading domain errors into JSON error bodies.
"""
