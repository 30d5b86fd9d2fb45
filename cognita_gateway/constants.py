"""
Application Constants

Values shared across the gateway that are not environment dependent.
"""

SERVICE_NAME = "cognita-mcp-gateway"

# Usage rows land here in the managed database
AI_LOGS_TABLE = "ai_logs"

# Upper bound for max_tokens on chat requests
MAX_TOKENS_LIMIT = 32768

# Largest accepted JSON request body
MAX_REQUEST_BODY_BYTES = 1024 * 1024

ENSEMBLE_PROVIDER = "ensemble"
AUTO_PROVIDER = "auto"
ENSEMBLE_SECTION_SEPARATOR = "\n\n---\n\n"
ALL_PROVIDERS_FAILED_MESSAGE = "All providers failed"
