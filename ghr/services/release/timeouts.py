from __future__ import annotations

# gh api calls (release lookup/create/update, comments)
GH_TIMEOUT_SECONDS = 60.0
