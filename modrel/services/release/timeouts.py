from __future__ import annotations

# gh release create / upload
GH_TIMEOUT_SECONDS = 5 * 60.0

# Forum updater posts one message.
FORUM_TIMEOUT_SECONDS = 2 * 60.0
