"""Configuration: settings, Supabase client manager and schema metadata."""
