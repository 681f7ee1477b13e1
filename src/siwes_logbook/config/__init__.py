import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, default is development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "siwes_logbook.config.production"

    if env in {"test", "testing"}:
        return "siwes_logbook.config.testing"

    return "siwes_logbook.config.development"
