# 📄 File: flower/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'flower' folder holds the shared-plant app: two partners, one rose,
# and a record of who watered it.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version and package metadata for the flower client core.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - flower.main (application container)
# - Package imports throughout the application

"""
flower - Shared Plant Watering Client

Client core of a two-person plant watering app: username or email sign-in,
a shared append-only watering log with live updates, today's counts per
partner and a "wilted" state after three hours without water.
"""

__version__ = "1.0.0"
__title__ = "flower"
__description__ = "Shared plant watering client core"
