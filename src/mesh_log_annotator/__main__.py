"""Module entrypoint.

Allows:
    python -m mesh_log_annotator
"""

from __future__ import annotations

from mesh_log_annotator.server.log_server import main

if __name__ == "__main__":
    main()
