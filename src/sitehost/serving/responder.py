"""Static file responses for site content."""

import mimetypes
from pathlib import Path

from starlette.responses import FileResponse, HTMLResponse

DEFAULT_CONTENT_TYPE = "application/octet-stream"
HTML_CACHE_CONTROL = "public, max-age=3600"
ASSET_CACHE_CONTROL = "public, max-age=31536000, immutable"

NOT_FOUND_HTML = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>404 Not Found</title>
  <style>
    body {
      font-family: system-ui, -apple-system, sans-serif;
      display: flex;
      align-items: center;
      justify-content: center;
      height: 100vh;
      margin: 0;
      background: #f3f4f6;
    }
    .container { text-align: center; padding: 2rem; }
    h1 { font-size: 3rem; margin: 0; color: #1f2937; }
    p { font-size: 1.25rem; color: #6b7280; }
  </style>
</head>
<body>
  <div class="container">
    <h1>404</h1>
    <p>Page not found</p>
  </div>
</body>
</html>
"""


def content_type_for(path: Path) -> str:
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or DEFAULT_CONTENT_TYPE


def cache_control_for(path: Path) -> str:
    """HTML is cached for an hour, every other asset for a year."""
    if path.suffix.lower() in (".html", ".htm"):
        return HTML_CACHE_CONTROL
    return ASSET_CACHE_CONTROL


def respond(path: Path) -> FileResponse:
    return FileResponse(
        path,
        media_type=content_type_for(path),
        headers={"Cache-Control": cache_control_for(path)},
    )


def not_found() -> HTMLResponse:
    """Generic 404 page, identical for every site."""
    return HTMLResponse(NOT_FOUND_HTML, status_code=404)
