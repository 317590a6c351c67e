"""
nodehatch test suite
====================

Test Modules
------------
- test_models.py: Pydantic configuration models
- test_constraints.py: Version constraint table
- test_registry.py: npm client and version resolver
- test_merger.py: Patch and manifest merging
- test_features.py: Feature resolvers and tsconfig builder
- test_pipeline.py: Resolution pipeline driver
- test_manifest.py: package.json I/O and exact-pin check
- test_generator.py: End-to-end scaffolding
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_pipeline.py

    # Run specific test class
    pytest tests/test_pipeline.py::TestResolveVersions
"""
