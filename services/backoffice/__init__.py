"""
Course Back-Office Core

Reusable logic behind the training-provider back office:
- Chilean RUT validation and formatting (módulo 11)
- In-memory search, filter, sort and pagination for tables
- Relevance-ranked global search across collections
- Bulk enrollment validation
- Pydantic settings and structured JSON logging with structlog
"""

__version__ = "0.1.0"
