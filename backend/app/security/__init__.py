# Security module
from app.security.auth import (
    get_password_hash, verify_password, create_access_token,
    authenticate_admin, get_current_admin
)

__all__ = [
    'get_password_hash', 'verify_password', 'create_access_token',
    'authenticate_admin', 'get_current_admin'
]
