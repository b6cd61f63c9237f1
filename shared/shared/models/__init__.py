from shared.models.base import CamelModel

__all__ = ["CamelModel"]
