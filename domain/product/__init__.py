from .entity import Product

__all__ = ["Product"]
