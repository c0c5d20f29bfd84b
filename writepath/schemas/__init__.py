"""Schemas — pydantic models for write inputs and step results."""
