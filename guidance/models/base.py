# Re-export the main Base class from db.py for guidance models
# so every model shares the same metadata
from db import Base

__all__ = ["Base"]
