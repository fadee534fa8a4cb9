"""Infrastructure Layer.

Adapters that perform file I/O and return or populate domain objects.
"""
