from .base import GenerativeModel
from .rbm import BinaryRBM

__all__ = ["GenerativeModel", "BinaryRBM"]
