"""
Test Suite for Book Review API

Test Organization:
- conftest.py: Shared fixtures (in-memory database, client, sample data)
- test_books.py: /api/books endpoints
- test_reviews.py: /api/reviews endpoints
- test_user_auth.py: /api/auth endpoints
- test_main.py: root, health, CORS and error envelopes
- test_services.py: service layer against the database
- test_security.py: passwords, tokens and settings

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_books.py -v
"""
