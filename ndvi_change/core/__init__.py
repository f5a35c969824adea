"""Core utilities and shared infrastructure.

- config: Backend configuration loading and validation
- constants: Named constants (safe centre, padding, endpoint path)
- exceptions: Custom exception hierarchy
- geometry: Centroid, bounds, area and ring helpers
"""
