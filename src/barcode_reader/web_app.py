from __future__ import annotations

import logging
from typing import Any, Callable

from flask import Flask, jsonify, render_template_string, request

from .config import ReaderConfig, configure_logging, parse_bool
from .engines import ENGINE_REGISTRY, BaseEngine, create_engine
from .errors import ImageReadError, UnknownEngineError
from .formats import parse_formats
from .reader import BarcodeReader

logger = logging.getLogger(__name__)

EngineFactory = Callable[[str], BaseEngine]


INDEX_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Barcode Reader</title>
    <style>
      body {
        margin: 0;
        font-family: "IBM Plex Sans", "Fira Sans", sans-serif;
        color: #1b1f2a;
        background: linear-gradient(135deg, #f5efe6, #e6f0f6);
        min-height: 100vh;
      }
      .page {
        max-width: 720px;
        margin: 0 auto;
        padding: 52px 24px 70px;
      }
      .card {
        background: #ffffff;
        border-radius: 22px;
        padding: 30px;
        border: 1px solid rgba(30, 40, 60, 0.12);
        box-shadow: 0 30px 60px rgba(15, 20, 30, 0.18);
        display: grid;
        gap: 16px;
      }
      label {
        font-size: 0.85rem;
        font-weight: 700;
      }
      select,
      input[type="text"],
      input[type="file"] {
        width: 100%;
        padding: 12px 14px;
        border-radius: 14px;
        border: 1px solid rgba(30, 40, 60, 0.12);
        font-size: 1rem;
        box-sizing: border-box;
      }
      button {
        border: none;
        background: #0f8b8d;
        color: #fff;
        padding: 12px 18px;
        border-radius: 14px;
        font-weight: 600;
        cursor: pointer;
      }
      #result {
        font-family: monospace;
        white-space: pre-wrap;
      }
    </style>
  </head>
  <body>
    <div class="page">
      <h1>Barcode Reader</h1>
      <form id="decode_form" class="card">
        <label for="image">Image</label>
        <input id="image" name="image" type="file" accept="image/*" required>
        <label for="engine">Engine</label>
        <select id="engine" name="engine">
          {% for engine in engines %}
          <option value="{{ engine }}" {% if engine == default_engine %}selected{% endif %}>{{ engine }}</option>
          {% endfor %}
        </select>
        <label for="formats">Formats</label>
        <input id="formats" name="formats" type="text" value="{{ default_formats }}">
        <label><input name="performance_mode" type="checkbox" value="true" {% if performance_mode %}checked{% endif %}> Performance mode</label>
        <button type="submit">Decode</button>
        <div id="result"></div>
      </form>
    </div>
    <script>
      const form = document.getElementById("decode_form");
      const result = document.getElementById("result");
      form.addEventListener("submit", async (event) => {
        event.preventDefault();
        const data = new FormData(form);
        if (!data.has("performance_mode")) {
          data.set("performance_mode", "false");
        }
        result.textContent = "Decoding...";
        try {
          const resp = await fetch("/api/decode", { method: "POST", body: data });
          const payload = await resp.json();
          result.textContent = JSON.stringify(payload, null, 2);
        } catch (err) {
          result.textContent = "Request failed.";
        }
      });
    </script>
  </body>
</html>
"""


def _error(message: str, status: int):
    return jsonify({"found": False, "value": None, "format": None, "engine": None, "error": message}), status


def create_app(
    config: ReaderConfig | None = None,
    engine_factory: EngineFactory | None = None,
) -> Flask:
    cfg = config or ReaderConfig.from_env()
    factory = engine_factory or create_engine

    app = Flask(__name__)
    app.config["READER_CONFIG"] = cfg

    @app.get("/")
    def index() -> str:
        return render_template_string(
            INDEX_TEMPLATE,
            engines=list(ENGINE_REGISTRY.keys()),
            default_engine=cfg.engine,
            default_formats=",".join(fmt.value for fmt in cfg.formats),
            performance_mode=cfg.performance_mode,
        )

    @app.get("/api/engines")
    def list_engines():
        return jsonify({"engines": list(ENGINE_REGISTRY.keys()), "default": cfg.engine})

    @app.post("/api/decode")
    def decode_image():
        upload = request.files.get("image")
        if upload is None or not getattr(upload, "filename", ""):
            return _error("No image provided.", 400)

        engine_key = (request.form.get("engine") or cfg.engine).strip().lower()
        raw_mode = request.form.get("performance_mode")
        try:
            performance_mode = parse_bool(raw_mode) if raw_mode else cfg.performance_mode
        except ValueError:
            return _error(f"performance_mode must be a boolean, got {raw_mode!r}", 400)

        try:
            formats = parse_formats(request.form.get("formats")) or cfg.formats
        except ValueError as exc:
            return _error(str(exc), 400)

        try:
            engine = factory(engine_key)
        except UnknownEngineError as exc:
            return _error(str(exc), 404)
        reader = BarcodeReader(performance_mode, *formats, engine=engine)

        payload: dict[str, Any]
        with reader:
            found = reader.decode(upload.read())
            error = reader.error
            result = reader.last_result

            if isinstance(error, ImageReadError):
                return _error(str(error), 422)

            payload = {
                "found": found,
                "value": reader.found_value,
                "format": result.format.value if result and result.format else None,
                "engine": reader.engine.name,
                "error": str(error) if error is not None and not found else None,
            }

        logger.info("Decoded upload %s with %s: found=%s", upload.filename, engine_key, found)
        return jsonify(payload)

    return app


def main() -> None:
    cfg = ReaderConfig.from_env()
    configure_logging(cfg.log_level)
    app = create_app(cfg)
    app.run(host="127.0.0.1", port=8000, debug=False)


if __name__ == "__main__":
    main()
