from .config import InterpolationConfig

__all__ = ["InterpolationConfig"]
