# 📄 File: flower/modules/accounts/__init__.py
# 🧭 Purpose (Layman Explanation):
# Everything about who you are in the app: signing up with a username, signing in with a
# username or email, verifying your email and showing your name to your partner.
# 🧪 Purpose (Technical Summary):
# Accounts module laid out by layers (domain, application, infrastructure, presentation)
# over the identity provider and the usernames/users/profiles collections.
# 🔗 Dependencies:
# pydantic, supabase, flower.shared
# 🔄 Connected Modules / Calls From:
# flower.main, watering module (session and sign-out)

"""
Accounts Module

This module handles:
- Registration with a unique, case-insensitive username
- Sign-in by username or email
- Email verification
- Public profiles and the display-name cache
- Self-healing of partially completed registrations

Architecture follows Domain-Driven Design:
- Domain: Models, repository interfaces and services
- Application: Session context
- Infrastructure: Supabase Auth adapter and table repositories
- Presentation: Headless form view-models
"""
