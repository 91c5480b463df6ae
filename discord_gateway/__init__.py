"""Discord Gateway - bot message relay and Discord OAuth2 login"""

__version__ = "1.0.0"
