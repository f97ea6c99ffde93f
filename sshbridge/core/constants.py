"""
Project constants definitions
"""

# ============================================================
# Connection Defaults
# ============================================================

DEFAULT_SSH_PORT = 22
DEFAULT_CONNECT_TIMEOUT = 10
MIN_PORT = 1
MAX_PORT = 65535

# ============================================================
# Transfer / Exec Buffers
# ============================================================

DOWNLOAD_CHUNK_SIZE = 32 * 1024
EXEC_RECV_BUFFER = 4096
EXEC_POLL_INTERVAL = 0.01
TEXT_ENCODING = "utf-8"

# ============================================================
# Configuration
# ============================================================

ENV_PREFIX = "SSHBRIDGE_"
CONFIG_SECTION = "ssh"

# ============================================================
# MCP Server
# ============================================================

SERVER_NAME = "SSH MCP Server"
