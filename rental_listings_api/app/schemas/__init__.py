"""
Pydantic schema definitions for API payloads.

Schemas are separated from storage documents to decouple the API
representation from what happens to be saved in Firestore.
"""
