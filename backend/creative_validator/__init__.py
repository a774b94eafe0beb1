"""
Creative Compatibility Engine.

Validates advertising creatives against the placement specifications of
several ad networks and groups files that form multi-asset creatives.
"""
__version__ = "1.0.0"
