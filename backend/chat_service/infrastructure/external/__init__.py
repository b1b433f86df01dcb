from chat_service.infrastructure.external.http_profile_directory import (
    HttpProfileDirectory,
)

__all__ = ["HttpProfileDirectory"]
