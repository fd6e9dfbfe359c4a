from .owners import OwnerRegistry
from .payload import decode_data, encode_data
from .policies_loader import load_policies_from_yaml

__all__ = [
    "OwnerRegistry",
    "decode_data",
    "encode_data",
    "load_policies_from_yaml",
]
