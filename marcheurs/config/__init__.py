from marcheurs.config.settings import settings

__all__ = ["settings"]
