"""
repograph command line interface.

License: MIT
"""
