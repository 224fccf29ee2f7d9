"""
Availability Blueprint
"""

from app.api.availability.routes import availability_bp

__all__ = ['availability_bp']
