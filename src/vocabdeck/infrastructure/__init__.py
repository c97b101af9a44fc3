# Infrastructure Package
from .json_store import JsonDeckRepository

__all__ = ["JsonDeckRepository"]
