from shortlinks.services.shortening_service import ShorteningService
from shortlinks.services.redirect_resolver import RedirectResolver
from shortlinks.services.expiry_sweeper import ExpirySweeper


__all__ = [
    'ShorteningService',
    'RedirectResolver',
    'ExpirySweeper',
]
