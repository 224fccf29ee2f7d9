"""
Utilities Package
"""
