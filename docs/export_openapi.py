# docs/export_openapi.py
import json
import sys
from pathlib import Path

from main import create_app


def main(out: str = "docs/openapi.json") -> Path:
    out_path = Path(out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    # schema generation only, lifespan (DB / clients) is never entered
    schema = create_app().openapi()

    out_path.write_text(
        json.dumps(schema, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    print(f"[OK] wrote: {out_path}")
    return out_path


if __name__ == "__main__":
    main(*sys.argv[1:2])
