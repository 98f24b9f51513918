"""Constants for the HTTP lock integration."""

DOMAIN = "http_lock"
VERSION = "1.0.0"

USER_AGENT = f"homeassistant-{DOMAIN}/{VERSION}"

# Configuration keys
CONF_OPEN_URL = "open_url"
CONF_OPEN_BODY = "open_body"
CONF_OPEN_HEADERS = "open_headers"
CONF_CLOSE_URL = "close_url"
CONF_CLOSE_BODY = "close_body"
CONF_CLOSE_HEADERS = "close_headers"
CONF_HTTP_METHOD = "http_method"
CONF_AUTO_LOCK = "auto_lock"  # Send a new close request after unlocking
CONF_AUTO_LOCK_DELAY = "auto_lock_delay"
CONF_RESET_LOCK = "reset_lock"  # Only flip the reported state back to secured
CONF_RESET_LOCK_TIME = "reset_lock_time"
CONF_MANUFACTURER = "manufacturer"
CONF_MODEL = "model"
CONF_SERIAL = "serial"
CONF_FIRMWARE = "firmware"

# Default values
DEFAULT_TIMEOUT = 5
DEFAULT_HTTP_METHOD = "GET"
DEFAULT_AUTO_LOCK = False
DEFAULT_AUTO_LOCK_DELAY = 5
DEFAULT_RESET_LOCK = False
DEFAULT_RESET_LOCK_TIME = 5
DEFAULT_MANUFACTURER = "HTTP Lock"
DEFAULT_MODEL = DOMAIN
DEFAULT_SERIAL = VERSION
DEFAULT_FIRMWARE = VERSION

SUPPORTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
BODY_METHODS = {"POST", "PUT", "PATCH"}

# Timer names
TIMER_AUTO_LOCK = "auto_lock"
TIMER_RESET = "reset"
