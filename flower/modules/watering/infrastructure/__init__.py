"""Supabase-backed persistence of watering events."""
