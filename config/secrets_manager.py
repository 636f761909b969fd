import os
from typing import Optional

SECRETS_DIR = os.getenv("SECRETS_DIR", "/run/secrets")


def get_secret(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Resolve a configuration value.

    Lookup order: environment variable, Docker secret file
    (``/run/secrets/<name lowercased>``), then the given default.
    """
    value = os.getenv(name)
    if value is not None:
        return value

    secret_path = os.path.join(SECRETS_DIR, name.lower())
    if os.path.isfile(secret_path):
        with open(secret_path, "r") as f:
            return f.read().strip()

    return default
