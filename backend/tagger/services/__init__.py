# Services package init
"""
Image Tagger Backend — Services Layer
=======================================

What:  Business rules between routes (HTTP) and storage (persistence).
How:   Services are stateless singletons; each call receives the Storage it
       should act on, so tests can hand in a fresh backend.

Service Inventory:
    - IdentityService:  registration, login lookup, identity guard
    - ContentService:   image listing, generation, cascading delete
    - ThreadService:    thread creation, listing, moves and deletes
    - ImageSource:      external image URL provider (Lorem Picsum)
    - positioning:      pixel ↔ percent math shared with the client
    - sanitizer:        markup stripping for names and comments
"""
