"""
Service layer for the Camera Service
"""
