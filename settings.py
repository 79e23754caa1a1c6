from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Server configuration
PORT = config.get("PORT", 3000)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "0.0.0.0")

# Deployment environment. In "dev" the auth flow must go through a publicly
# reachable tunnel because the identity provider rejects localhost callbacks.
ENV = config.get("ENV", "production")
APP_URL = config.get("APP_URL", "http://localhost:3000")
PROXIED_LOCALHOST_APP_URL = config.get("PROXIED_LOCALHOST_APP_URL", "")

# Customer Account API (identity provider) configuration
CUSTOMER_ACCOUNT_API_URL = config.get("CUSTOMER_ACCOUNT_API_URL", "")
CUSTOMER_ACCOUNT_API_CLIENT_ID = config.get("CUSTOMER_ACCOUNT_API_CLIENT_ID", "")
CUSTOMER_ACCOUNT_API_CLIENT_SECRET = config.get("CUSTOMER_ACCOUNT_API_CLIENT_SECRET", "")
CUSTOMER_ACCOUNT_API_AUTHORIZATION_ENDPOINT = config.get("CUSTOMER_ACCOUNT_API_AUTHORIZATION_ENDPOINT", "")
CUSTOMER_ACCOUNT_API_TOKEN_ENDPOINT = config.get("CUSTOMER_ACCOUNT_API_TOKEN_ENDPOINT", "")
CUSTOMER_ACCOUNT_API_LOGOUT_ENDPOINT = config.get("CUSTOMER_ACCOUNT_API_LOGOUT_ENDPOINT", "")
CUSTOMER_ACCOUNT_API_SCOPES = config.get("CUSTOMER_ACCOUNT_API_SCOPES", "openid email customer-account-api:full")

# Empty means "{auth app url}/api/auth/callback"
REDIRECT_URI = config.get("REDIRECT_URI", "")

# client_secret_basic (Authorization: Basic header) or client_secret_post (secret in form body)
TOKEN_ENDPOINT_AUTH_METHOD = config.get("TOKEN_ENDPOINT_AUTH_METHOD", "client_secret_basic")

# The Customer Account API takes the raw access token, no "Bearer" prefix.
# Set to "Bearer" for providers that follow the generic convention.
CUSTOMER_API_AUTH_SCHEME = config.get("CUSTOMER_API_AUTH_SCHEME", "")

VERIFY_STATE = config.get("VERIFY_STATE", True)

# Cookie lifetimes (seconds)
ACCESS_TOKEN_MAX_AGE = config.get("ACCESS_TOKEN_MAX_AGE", 60 * 60)
REFRESH_TOKEN_MAX_AGE = config.get("REFRESH_TOKEN_MAX_AGE", 7 * 24 * 60 * 60)
STATE_MAX_AGE = config.get("STATE_MAX_AGE", 10 * 60)
COOKIE_DOMAIN = config.get("COOKIE_DOMAIN", "")

# Timeout configuration for identity provider calls
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 5.0)
# Request timeout: Total budget for a token exchange or customer query
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 10.0)
