"""
Operator instructions for backend setup errors

Table, policy and bucket problems cannot be fixed from the app; these payloads
tell the operator what to run in the Supabase dashboard. All SQL is idempotent.
"""
from typing import Any, Dict

TABLES_DOCS_URL = "https://supabase.com/docs/guides/database/tables#creating-tables"
RLS_DOCS_URL = "https://supabase.com/docs/guides/auth/row-level-security"
STORAGE_DOCS_URL = "https://supabase.com/docs/guides/storage"


def _select_insert_policies(table: str) -> str:
    return f"""-- Read access for own projects
DROP POLICY IF EXISTS "Enable read access for own projects" ON public.{table};
CREATE POLICY "Enable read access for own projects"
ON public.{table} FOR SELECT
TO authenticated
USING (auth.uid() = user_id);

-- Insert for own projects
DROP POLICY IF EXISTS "Enable insert for own projects" ON public.{table};
CREATE POLICY "Enable insert for own projects"
ON public.{table} FOR INSERT
TO authenticated
WITH CHECK (auth.uid() = user_id);"""


def table_setup_sql(table: str = "projects") -> str:
    return f"""-- Safe to run multiple times.

CREATE TABLE IF NOT EXISTS public.{table} (
    id uuid NOT NULL DEFAULT gen_random_uuid(),
    user_id uuid NOT NULL,
    created_at timestamp with time zone NOT NULL DEFAULT now(),
    name text NOT NULL,
    description text NOT NULL,
    "type" text NOT NULL,
    resources jsonb NULL,
    CONSTRAINT {table}_pkey PRIMARY KEY (id),
    CONSTRAINT {table}_user_id_fkey FOREIGN KEY (user_id) REFERENCES auth.users(id) ON DELETE CASCADE
);

ALTER TABLE public.{table} ENABLE ROW LEVEL SECURITY;

{_select_insert_policies(table)}

-- Delete for own projects
DROP POLICY IF EXISTS "Enable delete for own projects" ON public.{table};
CREATE POLICY "Enable delete for own projects"
ON public.{table} FOR DELETE
TO authenticated
USING (auth.uid() = user_id);"""


def rls_setup_sql(table: str = "projects") -> str:
    return f"-- Safe to run multiple times.\n\n{_select_insert_policies(table)}"


def storage_policies_sql(bucket: str = "project-assets") -> str:
    statements = []
    for action, clause in (
        ("SELECT", "USING"),
        ("INSERT", "WITH CHECK"),
        ("UPDATE", "USING"),
        ("DELETE", "USING"),
    ):
        policy = f"Enable {action.lower()} for own assets"
        statements.append(
            f'DROP POLICY IF EXISTS "{policy}" ON storage.objects;\n'
            f'CREATE POLICY "{policy}"\n'
            f"ON storage.objects FOR {action}\n"
            f"TO authenticated\n"
            f"{clause} (bucket_id = '{bucket}' AND auth.uid() = (storage.foldername(name))[1]::uuid);"
        )
    return "-- Safe to run multiple times.\n\n" + "\n\n".join(statements)


def table_missing_help(table: str = "projects") -> Dict[str, Any]:
    return {
        "title": "Action Required: Create Database Table",
        "description": (
            f"The required '{table}' table is missing from your database. "
            "Run the script below in the Supabase SQL Editor to create it with its security policies."
        ),
        "sql": table_setup_sql(table),
        "docs_url": TABLES_DOCS_URL,
    }


def rls_help(table: str = "projects") -> Dict[str, Any]:
    return {
        "title": "Action Required: Enable Database Access",
        "description": (
            "Your projects can't be loaded because Row Level Security blocks access. "
            "Run the script below in the Supabase SQL Editor to grant users access to their own rows."
        ),
        "sql": rls_setup_sql(table),
        "docs_url": RLS_DOCS_URL,
    }


def bucket_missing_help(bucket: str = "project-assets") -> Dict[str, Any]:
    return {
        "title": "Action Required: Create Storage Bucket",
        "description": (
            f"Project creation failed because the Storage bucket '{bucket}' is missing. "
            "It stores the generated images."
        ),
        "steps": [
            "Open the Storage section of your Supabase dashboard.",
            "Click \"New bucket\".",
            f"Enter {bucket} as the bucket name.",
            "Make it a Public bucket.",
            "Save, then run the policy script below in the SQL Editor.",
        ],
        "sql": storage_policies_sql(bucket),
        "docs_url": STORAGE_DOCS_URL,
    }


def storage_access_help(bucket: str = "project-assets") -> Dict[str, Any]:
    return {
        "title": "Action Required: Enable Storage Access",
        "description": (
            f"Project creation failed because a Storage policy on '{bucket}' rejected the image upload. "
            "Run the script below in the Supabase SQL Editor to let users manage files in their own folder."
        ),
        "sql": storage_policies_sql(bucket),
        "docs_url": STORAGE_DOCS_URL,
    }
