"""Database table name constants and type references.

Schema and the append functions live in supabase/migrations/0001_init.sql.
"""

# Table names — single source of truth for Supabase queries
USERS = "users"
PROJECTS = "projects"

# Postgres functions that append one entry to a project's json array
APPEND_PROMPT_FN = "append_project_prompt"
APPEND_FILE_FN = "append_project_file"

# Postgres error code for a unique constraint violation
UNIQUE_VIOLATION = "23505"

# Role constants
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_SYSTEM = "system"
VALID_ROLES = {ROLE_USER, ROLE_ASSISTANT, ROLE_SYSTEM}

# Model settings bounds
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0
