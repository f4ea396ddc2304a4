"""
Application package.

Contains the application factory (``main``), shared infrastructure
(``core``), Pydantic schemas, the service layer and the HTTP routers.
"""
