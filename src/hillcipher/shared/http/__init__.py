from .__http import bearer_token, current_user, server_error_handler, text_repository

__all__ = ["bearer_token", "current_user", "server_error_handler", "text_repository"]
