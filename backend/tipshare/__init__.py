"""
TipShare Backend: Application Package Initializer
===================================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │      Routes + Dependencies (HTTP)   │  ← status codes, bearer tokens
    ├─────────────────────────────────────┤
    │   Services (Identity, Tips)         │  ← uniqueness, ownership rules
    ├─────────────────────────────────────┤
    │   Security (TokenSigner)            │  ← HS256 identity tokens
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← stored records / API contract
    ├─────────────────────────────────────┤
    │   Database (JsonFileStore)          │  ← one JSON document, atomic saves
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
