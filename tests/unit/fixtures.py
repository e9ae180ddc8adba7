"""Test constants shared across tunnel-bot unit tests."""

TEST_API_TOKEN = "123456:TEST-token"
TEST_AGENT_BINARY = "/usr/local/bin/ngrok"
TEST_AGENT_MISSING_BINARY = "/nonexistent/ngrok"

TEST_OPERATOR = "alice"
TEST_OTHER_OPERATOR = "mallory"
TEST_DISPLAY_NAME = "Alice"
TEST_CHAT_ID = 4242
TEST_MESSAGE_ID = 17
TEST_CALLBACK_ID = "cbq-1"

# Profiles
TEST_PROFILE_WEB = "web"
TEST_PROFILE_WEB_ARGS = "http 8080"
TEST_PROFILE_SSH = "ssh"
TEST_PROFILE_SSH_ARGS = "tcp 22 --region eu"
TEST_PROFILES_DATA = {
    TEST_PROFILE_WEB: TEST_PROFILE_WEB_ARGS,
    TEST_PROFILE_SSH: TEST_PROFILE_SSH_ARGS,
}

# Status API
TEST_STATUS_URL = "http://localhost:4040/api/tunnels"
TEST_PUBLIC_URL_WEB = "https://abc.ngrok.io"
TEST_PUBLIC_URL_SSH = "tcp://0.tcp.eu.ngrok.io:12345"
TEST_TUNNELS_PAYLOAD = {
    "tunnels": [
        {
            "name": TEST_PROFILE_WEB,
            "uri": "/api/tunnels/web",
            "public_url": TEST_PUBLIC_URL_WEB,
            "proto": "https",
            "config": {"addr": "http://localhost:8080", "inspect": True},
            "metrics": {"conns": {"count": 0}},
        },
        {
            "name": TEST_PROFILE_SSH,
            "public_url": TEST_PUBLIC_URL_SSH,
            "proto": "tcp",
        },
    ],
    "uri": "/api/tunnels",
}

# Process
TEST_PID = 31337
TEST_RETURN_CODE_SIGTERM = -15
TEST_RETURN_CODE_ERROR = 2

# Errors
TEST_ERROR_NOT_FOUND = "No such file or directory"
TEST_ERROR_PERMISSION_DENIED = "Permission denied"
TEST_ERROR_CONNECTION_REFUSED = "Connection refused"

# Telegram
TEST_BOT_USERNAME = "tunnel_test_bot"
TEST_BOT_FIRST_NAME = "Tunnel Bot"
