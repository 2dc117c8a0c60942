"""
Utils module
"""
