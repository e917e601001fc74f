"""
HTTP layer for the Camera Service
"""
