from functools import lru_cache

from crosscut_site.config import load_settings

@lru_cache()
def get_settings():
    return load_settings()
