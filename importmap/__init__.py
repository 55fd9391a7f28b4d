from .declaration import InvalidDeclaration
from .entries import PinnedDirectory, PinnedFile
from .map import ImportMap
from .resolver import AssetNotFound, CallableResolver, Resolver, StaticfilesResolver

__all__ = [
    "AssetNotFound",
    "CallableResolver",
    "ImportMap",
    "InvalidDeclaration",
    "PinnedDirectory",
    "PinnedFile",
    "Resolver",
    "StaticfilesResolver",
]
