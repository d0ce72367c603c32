"""
crudkit: generic CRUD REST scaffolding on FastAPI and async SQLAlchemy.

Entity -> Repository -> Service -> Controller, with a uniform response
envelope and one exception-to-HTTP mapping at the boundary.
"""
