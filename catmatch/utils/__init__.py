"""Utilities package"""

from .hash_utils import hash_string, generate_match_cache_key, generate_attribute_cache_key
from .resource_loader import load_yaml_resource, load_common_vocabulary, load_marketplace_resource

__all__ = [
    "hash_string",
    "generate_match_cache_key",
    "generate_attribute_cache_key",
    "load_yaml_resource",
    "load_common_vocabulary",
    "load_marketplace_resource",
]
