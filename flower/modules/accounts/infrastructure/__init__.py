# 📄 File: flower/modules/accounts/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# The parts that actually talk to the hosted backend for accounts.
# 🧪 Purpose (Technical Summary):
# Supabase Auth adapter (external) and PostgREST repositories plus schema models (database).
# 🔗 Dependencies:
# supabase, postgrest, SQLAlchemy
# 🔄 Connected Modules / Calls From:
# flower.main, migrations/env.py
