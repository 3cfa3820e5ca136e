from .xp_service import XpService

__all__ = ['XpService']
