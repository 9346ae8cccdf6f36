"""Controller package - Route handlers"""
from .site_controller import SiteController
from .admin_controller import AdminController
from .api_controller import ApiController

__all__ = ['SiteController', 'AdminController', 'ApiController']
