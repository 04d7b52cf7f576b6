"""
Typed functions for each Skyfish API endpoint.
"""
