"""
API Schemas - Pydantic models for request/response validation

These schemas define the envelopes around records. Record fields
themselves are validated by the record models in recordstore.models.
"""
