"""
Random source and logging helpers.
"""
