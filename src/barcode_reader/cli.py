from __future__ import annotations

from pathlib import Path

from InquirerPy import inquirer

from .config import ReaderConfig, configure_logging
from .engines import ENGINE_REGISTRY
from .formats import BarcodeFormat, parse_formats
from .imaging import ImageFormat
from .reader import BarcodeReader
from .scan import save_report_json, scan_directory


def _select_engine(default: str) -> str | None:
    choices = list(ENGINE_REGISTRY.keys())
    if not choices:
        print("No engines registered.")
        return None

    selected = inquirer.select(
        message="Select decoding engine:",
        choices=choices,
        default=default if default in choices else choices[0],
    ).execute()
    return str(selected)


def _prompt_target() -> Path | None:
    selected = inquirer.filepath(
        message="Image file or directory:",
        validate=lambda value: bool(value) and Path(value).expanduser().exists(),
        invalid_message="Path does not exist.",
    ).execute()
    if not selected:
        return None
    return Path(selected).expanduser()


def _prompt_formats(default: tuple[BarcodeFormat, ...]) -> tuple[BarcodeFormat, ...]:
    def _validate(value: str) -> bool:
        try:
            parse_formats(value)
        except ValueError:
            return False
        return True

    selected = inquirer.text(
        message="Barcode formats (comma separated):",
        default=",".join(fmt.value for fmt in default),
        validate=_validate,
        invalid_message="Unknown barcode format.",
    ).execute()
    return parse_formats(selected) or default


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def _decode_single(reader: BarcodeReader, image_path: Path) -> None:
    if not reader.decode(image_path):
        print(f"No barcode: {reader.error}")
        return

    result = reader.last_result
    fmt = result.format.value if result and result.format else "unknown"
    print(f"{fmt}: {reader.found_value}")

    if not inquirer.confirm(message="Save a copy of the image?", default=False).execute():
        return

    image_format = inquirer.select(
        message="Image format:",
        choices=[fmt.value for fmt in ImageFormat],
        default=ImageFormat.PNG.value,
    ).execute()
    target = inquirer.filepath(
        message="Save as:",
        default=str(image_path.with_suffix("")) + "_barcode",
    ).execute()
    saved = BarcodeReader.save_bitmap(reader.image, target, ImageFormat(image_format))
    print(f"saved_image_path: {saved}")


def _scan(reader: BarcodeReader, directory: Path) -> None:
    def _progress(record) -> None:
        status = record.value if record.found else (record.error or "no barcode")
        print(f"{record.image_path}: {status}")

    records, summary = scan_directory(directory, reader, progress_cb=_progress)
    if not records:
        print("No images found.")
        return

    out_root = Path.cwd()
    out_json = out_root / "outputs" / f"scan_{directory.name}_{reader.engine.name}.json"
    save_report_json(records, out_json)

    print("Summary")
    print(f"processed: {summary.processed}")
    print(f"found: {summary.found}")
    print(f"not_found: {summary.not_found}")
    print(f"failed: {summary.failed}")
    print(f"saved_json_path: {_relative(out_json, out_root)}")


def main() -> None:
    try:
        config = ReaderConfig.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        return
    configure_logging(config.log_level)

    engine_key = _select_engine(config.engine)
    if not engine_key:
        return

    target = _prompt_target()
    if target is None:
        return

    performance_mode = inquirer.confirm(
        message="Performance mode (skip try-harder and rotation passes)?",
        default=config.performance_mode,
    ).execute()
    formats = _prompt_formats(config.formats)

    try:
        reader = BarcodeReader(performance_mode, *formats, engine=engine_key)
    except Exception as exc:
        print(f"Failed to initialize engine '{engine_key}': {exc}")
        return

    with reader:
        if target.is_dir():
            _scan(reader, target)
        else:
            _decode_single(reader, target)


if __name__ == "__main__":
    main()
