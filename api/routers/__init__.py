"""
API Routers - HTTP endpoint handlers

Each router handles a specific domain of functionality:
- records: CRUD and query endpoints, one router per record model
- health: Readiness and repository load status
"""
