"""
High-level use cases for the owners API.

Each service module orchestrates repositories/adapters to implement business
rules (sign up, log in, change password, etc.). Routers (FastAPI endpoints)
call these services instead of manipulating the database or sessions
directly.
"""
