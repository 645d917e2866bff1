"""Authentication building blocks.

Learn: Two pieces live here:
1. validation: pure predicates over the raw form strings
2. errors: the error kinds every auth operation can report, and the
   tagged AuthResult the AuthManager returns instead of raising

The stateful part (session + registry) lives in
credstore.services.auth_manager.
"""
