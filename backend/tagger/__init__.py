"""
Image Tagger — Application Package
====================================

What: Collaborative image annotation: users generate placeholder images and pin
      positioned comment threads ("pins") on them.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   client/  (viewer, pins, session)  │  ← headless presentation layer
    ├─────────────────────────────────────┤
    │           routes/  (HTTP)           │  ← status codes, request parsing
    ├─────────────────────────────────────┤
    │         services/  (rules)          │  ← positioning & ownership
    ├─────────────────────────────────────┤
    │   schemas/  +  models/  (data)      │  ← Pydantic records, ORM rows
    ├─────────────────────────────────────┤
    │    storage/  (memory | sql)         │  ← swappable persistence
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
