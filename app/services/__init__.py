"""
Services Package

Business logic, kept separate from HTTP handling so it can be reused and
tested against a database directly.

Current services:
- books.py: Book catalog CRUD
- reviews.py: Review CRUD and ownership rules
- ratings.py: Book rating aggregation
- users.py: Registration and credential checks
- security.py: Password hashing and JWT utilities
- rate_limiter.py: Rate limiting with slowapi
"""
