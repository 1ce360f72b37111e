"""
auth — User authentication and authorization module.

Provides:
  • Signed session token issuance & validation (``TokenService``)
  • Password hashing (bcrypt)
  • Email + password login (``AuthenticationService``)
  • Self-or-admin / owner-only rules (``AuthorizationPolicy``)
  • ``get_current_caller`` FastAPI dependency
"""
