"""
Test Suite
==========

Test suite matching the image_renderer/ directory structure.

Test Categories:
- unit: Unit tests for individual components, with Playwright replaced by fakes
"""
