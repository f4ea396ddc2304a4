"""
Service layer.

Services hold the business rules and talk to the document store; the
API routers only translate HTTP requests into service calls.
"""
