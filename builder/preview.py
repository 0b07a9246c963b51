"""
Preview server - serve a finished dist/ the way it will be deployed.

Endpoints:
- GET /              - dist/index.html
- GET /api/health    - liveness + which dist/ is served
- GET /api/manifest  - every file in dist/ with its size
- everything else    - static files from dist/
"""

import os
from pathlib import Path
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from errors import FilesystemFailure
from reporter import collect_artifacts


class ArtifactInfo(BaseModel):
    path: str
    size: int


def create_app(dist_dir: str = "dist") -> FastAPI:
    dist = Path(dist_dir).resolve()
    if not dist.is_dir():
        raise FilesystemFailure("serve", dist, FileNotFoundError("run the build first"))

    app = FastAPI(title="Site preview")
    # Compress like a production host would
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.get("/", include_in_schema=False)
    async def serve_index():
        index = dist / "index.html"
        if not index.exists():
            raise HTTPException(status_code=404, detail="index.html not built")
        return FileResponse(str(index))

    @app.get("/api/health")
    async def health_check():
        return {"status": "ok", "dist": str(dist)}

    @app.get("/api/manifest", response_model=List[ArtifactInfo])
    async def manifest():
        return [ArtifactInfo(path=a.path, size=a.size) for a in collect_artifacts(dist)]

    # Mounted last so the routes above win
    app.mount("/", StaticFiles(directory=str(dist)), name="dist")
    return app


def main():
    import argparse
    import sys
    import uvicorn

    parser = argparse.ArgumentParser(description="Serve the built site for a local check")
    parser.add_argument("--dist", type=str, default="dist", help="Built site directory (default: dist)")
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    args = parser.parse_args()

    try:
        app = create_app(args.dist)
    except FilesystemFailure as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)

    print(f"🚀 Serving {args.dist}/ on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
