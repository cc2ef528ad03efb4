from functools import lru_cache

from supabase import Client, create_client

from .config import Settings, get_settings


def build_client(settings: Settings) -> Client:
    url = str(settings.supabase_url).rstrip("/")
    key = settings.supabase_key

    if "your-project.supabase.co" in url:
        raise RuntimeError(
            f"SUPABASE_URL points at the example project ({url}). "
            "Copy your project URL from the Supabase dashboard into .env."
        )
    return create_client(url, key)


@lru_cache()
def get_supabase() -> Client:
    return build_client(get_settings())
