"""Test data factories for deterministic test data generation."""

from tests.factories.commands import (
    FakeDirectory,
    make_context,
    make_member,
    make_message,
    make_responder,
    make_tree,
)

__all__ = [
    "FakeDirectory",
    "make_context",
    "make_member",
    "make_message",
    "make_responder",
    "make_tree",
]
