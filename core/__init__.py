"""
Core modules for the Camera Service

Submodules are imported directly, e.g. ``from core.file_cache import FileCacheManager``.
The package itself imports nothing: ``api.exceptions`` depends on ``core.constants``.
"""
