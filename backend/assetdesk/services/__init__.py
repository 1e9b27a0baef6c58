"""
Business services: one module or package per domain area.
"""
