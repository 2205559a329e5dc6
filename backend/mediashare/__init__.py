"""
MediaShare Backend — Application Package Initializer
====================================================

What: Marks the `mediashare` directory as a Python package.
Why:  Enables module imports like `from mediashare.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Shaping, orchestration, aggregation
    ├─────────────────────────────────────┤
    │      Store & Blob Adapters (I/O)    │  ← Cosmos / SQL documents, Azure / local blobs
    └─────────────────────────────────────┘

    Adapters are built once per application by the factory in main.py and
    handed to the services; routes pull the services from app.state.
"""

__version__ = "1.0.0"
