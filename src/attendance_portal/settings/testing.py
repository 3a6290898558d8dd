SECRET_KEY = "test-secret"

API_BASE_URL = "http://api.test"
API_TOKEN = ""
API_TIMEOUT = 2.0

MARKED_BY = "faculty"

SESSION_DAYS = 1

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
