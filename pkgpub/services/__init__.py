"""Publish and revert workflows."""
