"""User account server.

Account persistence with hashed credentials, served over a FastAPI
application backed by SQLModel.
"""

__version__ = "1.0.0"
