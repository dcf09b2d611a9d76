DOMAIN = "alfen_ev"

CONF_HOST = "host"
CONF_USERNAME = "username"
CONF_PASSWORD = "password"
CONF_SOCKET = "socket"
CONF_SCAN_INTERVAL = "scan_interval"

DEFAULT_USERNAME = "admin"
DEFAULT_SOCKET = 1
DEFAULT_SCAN_INTERVAL = 30
DEFAULT_API_TIMEOUT = 15
DEFAULT_KEEPALIVE_TIMEOUT = 30

MANUFACTURER = "Alfen"

# Wire protocol
API_PATH = "api"
API_CONTENT_TYPE = "alfen/json; charset=utf-8"
LOGIN = "login"
LOGOUT = "logout"
INFO = "info"
PROP = "prop"
CMD = "cmd"
PARAM_USERNAME = "username"
PARAM_PASSWORD = "password"
PARAM_COMMAND = "command"
COMMAND_REBOOT = "reboot"
PROPERTIES = "properties"
ID = "id"
VALUE = "value"

# Setter domains
CURRENT_LIMIT_MIN = 1
CURRENT_LIMIT_MAX = 32
GREEN_SHARE_MIN = 0
GREEN_SHARE_MAX = 100
COMFORT_LEVEL_MIN = 1400
COMFORT_LEVEL_MAX = 5000

# Logins beyond this many outstanding references are treated as leaked.
MAX_SESSION_REFS = 10
