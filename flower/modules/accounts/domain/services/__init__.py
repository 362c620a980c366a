# 📄 File: flower/modules/accounts/domain/services/__init__.py
# 🧭 Purpose (Layman Explanation):
# The account actions: sign up, sign in, look up usernames, show names, repair half-made accounts.
# 🧪 Purpose (Technical Summary):
# Domain services over the identity provider port and the account repositories.
# 🔗 Dependencies:
# Domain models and repository interfaces
# 🔄 Connected Modules / Calls From:
# flower.main, session, forms

"""
Accounts Domain Services

- UsernameDirectory: reserve / resolve usernames
- RegistrationService: ordered registration sequence
- AuthService: sign in / out and email verification
- ProfileService, DisplayNameCache: public profiles and name rendering
- AccountReconciler: repair of partial registrations
"""
