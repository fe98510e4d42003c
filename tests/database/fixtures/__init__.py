"""Test fixtures package."""

from .fake_accessor import FakeAccessor, StringTypeMapper

__all__ = [
    "FakeAccessor",
    "StringTypeMapper",
]
