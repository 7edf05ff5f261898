# Export all guidance models for easy imports
from .base import Base
from .program import GuidanceProgram

__all__ = [
    "Base",
    "GuidanceProgram",
]
