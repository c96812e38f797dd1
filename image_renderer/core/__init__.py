"""
Core Business Logic
==================

Core rendering functionality for the image renderer.

Modules:
- rendering: Request validation, browser lifecycle and capture
"""
