"""
Vendor asset cua model mac dinh vao package truoc khi build.

    python -m glm_tokens.fetch_assets [DEST]
"""

import sys
from pathlib import Path

from glm_tokens.core.assets import fetch_assets
from glm_tokens.core.logging_config import flush_logs, log_error, log_info


def main() -> int:
    dest = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    try:
        written = fetch_assets(dest)
    except Exception as e:
        log_error("[fetch_assets] Could not fetch model assets", e)
        flush_logs()
        return 1

    for path in written:
        log_info(f"[fetch_assets] Wrote {path}")
    flush_logs()
    return 0


if __name__ == "__main__":
    sys.exit(main())
