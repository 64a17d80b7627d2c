# Schemas package init
"""
TipShare Backend: API Schemas
===============================

Pydantic models for request bodies and response payloads. Stored records
live in tipshare.models; these are the shapes that cross the HTTP boundary.
"""
