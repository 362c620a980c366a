# 📄 File: flower/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# A collection of helpful tools other parts of the app use for logging, checking form input
# and working with times and ids.

# 🧪 Purpose (Technical Summary):
# Utilities package with structured logging, registration validators and time/id helpers.

# 🔗 Dependencies:
# - logging: Structured logging utilities
# - validators: Registration input validation
# - helpers: Clock and id helpers

# 🔄 Connected Modules / Calls From:
# Used by: All application modules

"""
Shared Utilities Package

- Structured logging with JSON formatting
- Registration input validation
- Time and identifier helpers
"""
