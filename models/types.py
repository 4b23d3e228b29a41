from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

# Supabase columns are JSONB / TEXT[]; SQLite (local mode, tests) stores plain JSON
JSONList = JSON().with_variant(JSONB(), "postgresql")
TextList = JSON().with_variant(ARRAY(Text()), "postgresql")
