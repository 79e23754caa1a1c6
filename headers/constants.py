"""HTTP request header constants for identity provider calls

The Customer Account API rejects token requests that carry no User-Agent
(403) or no Origin (401 invalid_token), so every outbound call sends both.
"""

from typing import Dict

# User-Agent string for identity provider requests
USER_AGENT = "storefront-customer-auth/1.0.0 (python-httpx)"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"

# Headers sent with every token endpoint request
TOKEN_REQUEST_HEADERS: Dict[str, str] = {
    "Content-Type": FORM_CONTENT_TYPE,
    "Accept": JSON_CONTENT_TYPE,
    "User-Agent": USER_AGENT,
}

# Headers sent with every Customer Account GraphQL request
GRAPHQL_REQUEST_HEADERS: Dict[str, str] = {
    "Content-Type": JSON_CONTENT_TYPE,
    "Accept": JSON_CONTENT_TYPE,
    "User-Agent": USER_AGENT,
}
