# 📄 File: flower/modules/accounts/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# The rules of accounts: what a valid username is, who owns it, and how signing in works.
# 🧪 Purpose (Technical Summary):
# Domain layer with models, repository interfaces, the identity provider port and services.
# 🔗 Dependencies:
# Subpackages only
# 🔄 Connected Modules / Calls From:
# Application, infrastructure and presentation layers
