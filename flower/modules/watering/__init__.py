# 📄 File: flower/modules/watering/__init__.py
# 🧭 Purpose (Layman Explanation):
# Everything about the rose: tapping to water it, counting today's waterings for each partner
# and deciding whether it looks wilted.
# 🧪 Purpose (Technical Summary):
# Watering module: append-only event log with live subscriptions, the dryness state machine,
# the view-state projection and the watering screen view-model.
# 🔗 Dependencies:
# pydantic, supabase (tables + realtime), flower.shared, accounts session
# 🔄 Connected Modules / Calls From:
# flower.main

"""
Watering Module

Architecture follows Domain-Driven Design:
- Domain: WateringEvent, DrynessModel, WateringRepository, WateringLog
- Application: WateringViewState projection
- Infrastructure: Supabase table + realtime repository, schema model
- Presentation: WateringScreen view-model
"""
