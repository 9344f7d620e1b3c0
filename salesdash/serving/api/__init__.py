"""
Sales Dashboard REST API
"""
