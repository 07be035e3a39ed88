"""Schemas — Pydantic models for request and response shapes."""
