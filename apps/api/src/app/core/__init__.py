"""
Core module - shared infrastructure for the API modules.

- config: pydantic-settings ``Settings``
- database: async engine, sessions and the declarative ``Base``
- security / auth: password hashing, JWTs and the bearer dependencies
- redis / rate_limit: optional Redis client and per-IP request limits
- email: Resend transactional mail
"""
