# 📄 File: flower/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a package of common tools every part of the app uses,
# like settings, logging and the backend connection.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, exceptions, subscriptions, infrastructure
# base classes and utilities.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - All feature modules

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management and the Supabase client
- Exception hierarchy and subscription handles
- Supabase repository base class
- Logging, validators and helpers
"""
