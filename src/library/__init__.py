"""Library management backend.

Books, readers and the loans that tie them together, served over a FastAPI
HTTP API backed by SQLModel.
"""

__version__ = "0.1.0"
