from chat_service.presentation.dependencies.auth import (
    AuthUser,
    authenticate_token,
    get_current_user,
)

__all__ = ["AuthUser", "authenticate_token", "get_current_user"]
