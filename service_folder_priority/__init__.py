"""
Folder Priority skill service.
"""
