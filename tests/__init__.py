"""
NOAH Test Suite
===============

Test organization:
- tests/unit/                     - Library tests (circuit, backends, ledger)
- tests/services/access_control/  - HTTP tests against the ASGI app

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=noah               # With coverage
"""
