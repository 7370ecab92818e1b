"""
Core modules for the marketplace functions: request pipeline, operations, routes and utilities.
"""
