from .auth_routes import auth_bp
from .user_routes import user
from .core_routes import core
from .donation_routes import donations_bp
from .contact_routes import contact_bp

__all__ = ["auth_bp", "user", "core", "donations_bp", "contact_bp"]
