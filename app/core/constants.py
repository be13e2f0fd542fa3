"""Application-wide constants and configuration values.

Centralizes magic numbers and configuration to avoid duplication
and make changes easier.
"""

# ============== TIME CONSTANTS (seconds) ==============
SECONDS_PER_DAY = 86400

# ============== CART ==============
CART_STORAGE_KEY = "luso-cart"
CART_EXPIRY_SECONDS = SECONDS_PER_DAY  # 24 hours
CART_SESSION_HEADER = "X-Cart-Session"
CART_SESSION_COOKIE = "cart_session"
CART_BADGE_LIMIT = 99  # floating button shows "99+" above this
MAX_CART_SESSIONS = 10_000

# ============== HAND-OFF ==============
WHATSAPP_BASE_URL = "https://wa.me"
WHATSAPP_PLACEHOLDER_NUMBER = "1234567890"
MESSAGE_DIVIDER_WIDTH = 30

# ============== CATALOG ==============
DEFAULT_API_URL = "http://localhost:3006/api"
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300x200/e5e7eb/6b7280?text=Sin+imagen"
DEFAULT_CATEGORY_NAME = "Sin categoría"
FEATURED_PRODUCTS_LIMIT = 8
API_TIMEOUT_SECONDS = 10.0

# ============== API ==============
DEFAULT_RATE_LIMIT = "100/minute"
DEFAULT_PORT = 8000
