# ABOUTME: Access to the Notion REST API
# ABOUTME: Pipeline Stage 1: Notion databases and block children → raw JSON records

"""
Notion Layer: Talk to the external hierarchical-document source

This layer handles:
- Authenticated, paginated requests to the Notion REST API
- The shared admission gate that bounds in-flight requests
- Mapping Notion failures onto the error hierarchy

Data Flow: Notion API → raw page and block dicts → content layer
"""

from .client import NotionClient, RequestGate

__all__ = ["NotionClient", "RequestGate"]
