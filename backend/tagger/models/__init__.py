# Models package init
"""
Image Tagger Backend — ORM Models
===================================

SQLAlchemy row types used only by the SQL storage backend. The rest of the
application works with the Pydantic schemas in tagger.schemas.
"""
