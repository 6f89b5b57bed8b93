import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; development is the default.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "concrete_ops.settings.production"

    if env in {"test", "testing"}:
        return "concrete_ops.settings.testing"

    return "concrete_ops.settings.development"
