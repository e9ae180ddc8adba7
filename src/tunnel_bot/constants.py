"""Constants for tunnel-bot.

This module centralizes the magic strings and numbers used throughout the
bot: chat commands, user-facing messages, configuration keys, defaults,
and the tunneling agent's status API contract.

Constants are organized by domain:
- Chat commands and callback tokens
- Messages
- Configuration keys and defaults
- Tunneling agent status API
- Process lifecycle
- Telegram Bot API
- Logging
"""

from typing import Final

# =============================================================================
# Chat Commands
# =============================================================================

COMMAND_START: Final[str] = "/start"
COMMAND_LAUNCH: Final[str] = "/launch"
COMMAND_SHUTDOWN: Final[str] = "/shutdown"
COMMAND_CANCEL: Final[str] = "/cancel"

# Callback token of the cancel button in the profile selection keyboard
CALLBACK_TOKEN_CANCEL: Final[str] = COMMAND_CANCEL

# =============================================================================
# Messages
# =============================================================================

MESSAGE_DEFAULT: Final[str] = "Welcome"
MESSAGE_UNKNOWN_COMMAND: Final[str] = "Unknown command"
MESSAGE_UNKNOWN_COMMAND_FORMAT: Final[str] = "{text}: Unknown command"
MESSAGE_NO_TUNNELS: Final[str] = "No tunnels available"
MESSAGE_NO_PROFILES: Final[str] = "No profiles configured"
MESSAGE_WHAT_TO_LAUNCH: Final[str] = "Choose a tunnel to launch"
MESSAGE_CANCEL: Final[str] = "Cancel"
MESSAGE_CANCELED: Final[str] = "Canceled"
MESSAGE_LAUNCHED_FORMAT: Final[str] = "Launched: {label}"
MESSAGE_LAUNCH_FAILED: Final[str] = "Launch failed"
MESSAGE_LAUNCH_FAILED_FORMAT: Final[str] = "Failed to launch: {error}"
MESSAGE_STATUS_FAILED_FORMAT: Final[str] = "Failed to get tunnels status: {error}"
MESSAGE_SHUTDOWN_SUCCESS: Final[str] = "Shutdown successfully"
MESSAGE_SHUTDOWN_SUCCESS_FORMAT: Final[str] = "Shutdown successfully: {outcome}"
MESSAGE_SHUTDOWN_FAILED_FORMAT: Final[str] = "Failed to shutdown: {error}"
MESSAGE_NO_RUNNING_PROCESS: Final[str] = "no running process"
MESSAGE_ENDPOINT_LINE_FORMAT: Final[str] = "▸ {name}: {public_url}"

EXIT_DESCRIPTION_STATUS_FORMAT: Final[str] = "exit status {code}"
EXIT_DESCRIPTION_SIGNAL_FORMAT: Final[str] = "terminated by signal {signal}"

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_CONFIG_FILE: Final[str] = "config.yaml"
SETTINGS_ENV_PREFIX: Final[str] = "TUNNEL_BOT_"

CONFIG_KEY_API_TOKEN: Final[str] = "api_token"
CONFIG_KEY_AGENT_BINARY: Final[str] = "ngrok_bin_path"
CONFIG_KEY_ALLOWED_IDS: Final[str] = "available_ids"
CONFIG_KEY_PROFILES: Final[str] = "tunnel_params"
CONFIG_KEY_SETTLE_DELAY: Final[str] = "launch_delay_seconds"
CONFIG_KEY_MONITOR_INTERVAL: Final[str] = "monitor_interval"
CONFIG_KEY_VERBOSE: Final[str] = "is_verbose"
CONFIG_KEY_STATUS_API_URL: Final[str] = "tunnels_api_url"
CONFIG_KEY_LOG_FILE: Final[str] = "log_file"

DEFAULT_AGENT_BINARY: Final[str] = "ngrok"
DEFAULT_SETTLE_DELAY_SECONDS: Final[float] = 5.0
DEFAULT_MONITOR_INTERVAL_SECONDS: Final[float] = 3.0

CONFIG_ERROR_NOT_FOUND: Final[str] = "Config file not found: {path}"
CONFIG_ERROR_READ: Final[str] = "Failed to read config file: {error}"
CONFIG_ERROR_PARSE: Final[str] = "Failed to parse config file: {error}"
CONFIG_ERROR_NOT_MAPPING: Final[str] = "Config file must contain a mapping at the top level"
CONFIG_ERROR_MISSING_TOKEN: Final[str] = "API token is not configured"
CONFIG_ERROR_EMPTY_BINARY: Final[str] = "Tunneling agent binary path cannot be empty"
CONFIG_ERROR_INVALID_ALLOWED_IDS: Final[str] = "Allowed ids must be a list of strings"
CONFIG_ERROR_INVALID_PROFILES: Final[str] = "Tunnel profiles must be a mapping of label to arguments"
CONFIG_ERROR_EMPTY_PROFILE_LABEL: Final[str] = "Tunnel profile label cannot be empty"
CONFIG_ERROR_RESERVED_PROFILE_LABEL: Final[str] = "Tunnel profile label is reserved: {label}"
CONFIG_ERROR_EMPTY_PROFILE_ARGS: Final[str] = "Tunnel profile has no launch arguments: {label}"
CONFIG_ERROR_INVALID_PROFILE_ARGS: Final[str] = (
    "Tunnel profile has invalid launch arguments: {label} ({error})"
)
CONFIG_ERROR_NEGATIVE_SETTLE_DELAY: Final[str] = "Launch delay cannot be negative"
CONFIG_ERROR_MONITOR_INTERVAL: Final[str] = "Monitor interval must be greater than zero"
CONFIG_ERROR_INVALID_NUMBER: Final[str] = "Expected a number for {key}"

# =============================================================================
# Tunneling Agent Status API
# =============================================================================

# https://ngrok.com/docs/agent/api/
DEFAULT_STATUS_API_URL: Final[str] = "http://localhost:4040/api/tunnels"
STATUS_API_TIMEOUT_SECONDS: Final[float] = 5.0

STATUS_ERROR_CONNECT: Final[str] = "Failed to request tunnels API: {error}"
STATUS_ERROR_RESPONSE: Final[str] = "Tunnels API returned HTTP {status_code}"
STATUS_ERROR_PAYLOAD: Final[str] = "Failed to parse tunnels API response: {error}"

STATUS_LOG_PAYLOAD_BODY: Final[str] = "Failed to parse tunnels API response: {body}"

# =============================================================================
# Process Lifecycle
# =============================================================================

PROCESS_SHUTDOWN_TIMEOUT_SECONDS: Final[float] = 5.0

PROCESS_LOG_KILLING: Final[str] = "{operation}: terminating running agent (pid {pid})"
PROCESS_LOG_KILL_ESCALATE: Final[str] = "Agent did not exit after SIGTERM, killing (pid {pid})"
PROCESS_LOG_STARTING: Final[str] = "launch: starting agent: {command}"
PROCESS_LOG_STARTED: Final[str] = "launch: agent started (pid {pid}), waiting {delay}s"
PROCESS_LOG_EXITED: Final[str] = "Agent exited (pid {pid}): {outcome}"
PROCESS_LOG_ALREADY_GONE: Final[str] = "Agent already gone while signaling (pid {pid})"

OPERATION_LAUNCH: Final[str] = "launch"
OPERATION_SHUTDOWN: Final[str] = "shutdown"

# =============================================================================
# Telegram Bot API
# =============================================================================

TELEGRAM_API_BASE_URL: Final[str] = "https://api.telegram.org"
TELEGRAM_API_URL_TEMPLATE: Final[str] = "{base_url}/bot{token}/{method}"
TELEGRAM_HTTP_TIMEOUT_SECONDS: Final[float] = 30.0

TELEGRAM_METHOD_GET_ME: Final[str] = "getMe"
TELEGRAM_METHOD_DELETE_WEBHOOK: Final[str] = "deleteWebhook"
TELEGRAM_METHOD_GET_UPDATES: Final[str] = "getUpdates"
TELEGRAM_METHOD_SEND_MESSAGE: Final[str] = "sendMessage"
TELEGRAM_METHOD_SEND_CHAT_ACTION: Final[str] = "sendChatAction"
TELEGRAM_METHOD_ANSWER_CALLBACK_QUERY: Final[str] = "answerCallbackQuery"
TELEGRAM_METHOD_EDIT_MESSAGE_TEXT: Final[str] = "editMessageText"

TELEGRAM_CHAT_ACTION_TYPING: Final[str] = "typing"
TELEGRAM_ALLOWED_UPDATES: Final[tuple[str, ...]] = ("message", "callback_query")

TELEGRAM_ERROR_REQUEST: Final[str] = "Telegram API request failed ({method}): {error}"
TELEGRAM_ERROR_NOT_OK: Final[str] = "Telegram API returned an error ({method}): {description}"
TELEGRAM_ERROR_INVALID_RESPONSE: Final[str] = (
    "Telegram API returned an invalid response ({method}): {error}"
)
TELEGRAM_ERROR_NO_DESCRIPTION: Final[str] = "no description"

# =============================================================================
# Bot Runtime
# =============================================================================

BOT_THREAD_NAME_FORMAT: Final[str] = "tunnel-bot-update-{update_id}"

EXIT_CODE_FAILURE: Final[int] = 1
EXIT_CODE_INTERRUPTED: Final[int] = 130

# =============================================================================
# Logging
# =============================================================================

LOGGER_NAME: Final[str] = "tunnel_bot"
LOG_FORMAT_DEFAULT: Final[str] = "%(asctime)s [%(levelname)s] %(message)s"
LOG_FORMAT_DEBUG: Final[str] = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT: Final[int] = 3
