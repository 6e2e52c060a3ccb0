"""
Record Store API - FastAPI layer over recordstore repositories
"""
