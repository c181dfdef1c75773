from __future__ import annotations

from weaviate_hub.server import main

if __name__ == "__main__":
    main()
