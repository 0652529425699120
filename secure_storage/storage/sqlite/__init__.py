from .manager import SQLiteMedium

__all__ = ['SQLiteMedium']
