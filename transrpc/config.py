import os
import dotenv


dotenv.load_dotenv()


# Defaults
VERBOSE = False
LOG_PATH = ""
LOG_LEVEL = "INFO"
LOG_ROTATION = "1 week"
LOG_RETENTION = "1 month"

TRANSMISSION_URL = "http://localhost:9091/transmission/rpc"
TRANSMISSION_USERNAME = ""
TRANSMISSION_PASSWORD = ""
TRANSMISSION_TIMEOUT = 10.0
TRANSMISSION_CACHE_SESSION = False


class Config:
    VERBOSE = os.getenv("VERBOSE", str(VERBOSE)).lower() == "true"

    # Empty path disables the file sink
    LOG_PATH = os.getenv("LOG_PATH", LOG_PATH)
    LOG_LEVEL = os.getenv("LOG_LEVEL", LOG_LEVEL)
    LOG_ROTATION = os.getenv("LOG_ROTATION", LOG_ROTATION)
    LOG_RETENTION = os.getenv("LOG_RETENTION", LOG_RETENTION)

    # Transmission Configuration
    TRANSMISSION_URL = os.getenv("TURL", TRANSMISSION_URL)
    TRANSMISSION_USERNAME = os.getenv("TUSER", TRANSMISSION_USERNAME)
    TRANSMISSION_PASSWORD = os.getenv("TPWD", TRANSMISSION_PASSWORD)
    TRANSMISSION_TIMEOUT = float(os.getenv("TRANSMISSION_TIMEOUT", TRANSMISSION_TIMEOUT))
    TRANSMISSION_CACHE_SESSION = os.getenv(
        "TRANSMISSION_CACHE_SESSION", str(TRANSMISSION_CACHE_SESSION)
    ).lower() == "true"
