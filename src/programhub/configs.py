"""Configuration module."""

import os

from omegaconf import OmegaConf

_DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "resources", "sample_settings.yaml")
SETTINGS_PATH = os.getenv("PROGRAMHUB_SETTINGS_PATH", _DEFAULT_SETTINGS_PATH)

if not os.path.exists(SETTINGS_PATH):
    raise FileNotFoundError(f"ProgramHub settings file not found: {SETTINGS_PATH}")

settings = OmegaConf.load(SETTINGS_PATH)

PROJECT_NAME = settings.get("project", {}).get("name", "programhub")

##########################
#  Log settings          #
##########################

LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", settings["log"].get("log_path", "programhub.log"))
LOG_FILE_LEVEL = os.getenv("LOG_FILE_LEVEL", settings["log"].get("log_file_level", "disable")).upper()
LOG_STREAM_LEVEL = os.getenv("LOG_STREAM_LEVEL", settings["log"].get("log_stream_level", "error")).upper()

##########################
#  MongoDB settings      #
##########################

MONGO_URI = os.getenv("MONGO_URI", settings["mongodb"].get("uri", "mongodb://localhost:27017"))
MONGO_DB = os.getenv("MONGO_DB", settings["mongodb"].get("db", PROJECT_NAME))
_create_indices = os.getenv("MONGO_CREATE_INDICES", settings["mongodb"].get("create_indices", True))
MONGO_CREATE_INDICES = str(_create_indices).lower() in ("true", "1", "yes")

##########################
#  Query settings        #
##########################

_query_settings = settings.get("query", {})
QUERY_DEFAULT_LIMIT = int(_query_settings.get("default_limit", 25))
QUERY_MAX_LIMIT = int(_query_settings.get("max_limit", 100))
QUERY_DEFAULT_SORT_FIELD = _query_settings.get("default_sort_field", "createdAt")

##########################
#  Geocoder settings     #
##########################

_geocoder_settings = settings.get("geocoder", {})
GEOCODER_PROVIDER = os.getenv("GEOCODER_PROVIDER", _geocoder_settings.get("provider", "nominatim"))
GEOCODER_API_KEY = os.getenv("GEOCODER_API_KEY", _geocoder_settings.get("api_key", None))
GEOCODER_USER_AGENT = _geocoder_settings.get("user_agent", PROJECT_NAME)
GEOCODER_TIMEOUT = float(_geocoder_settings.get("timeout", 10))
GEOCODER_DISTANCE_UNIT = os.getenv("GEOCODER_DISTANCE_UNIT", _geocoder_settings.get("distance_unit", "km"))

##########################
#  Web server settings   #
##########################

_webserver_settings = settings.get("web_server", {})
WEBSERVER_HOST = os.getenv("WEBSERVER_HOST", _webserver_settings.get("host", "0.0.0.0"))
WEBSERVER_PORT = int(os.getenv("WEBSERVER_PORT", _webserver_settings.get("port", 5000)))
