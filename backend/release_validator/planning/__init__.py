"""Test plan generation capability."""
