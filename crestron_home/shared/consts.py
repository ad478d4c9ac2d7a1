from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Header names used by the Crestron Home REST API
AUTH_TOKEN_HEADER = "Crestron-RestAPI-AuthToken"
AUTH_KEY_HEADER = "Crestron-RestAPI-AuthKey"

API_BASE_PATH = "/cws/api"
