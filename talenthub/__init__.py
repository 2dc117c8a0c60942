"""
Talenthub module
"""
