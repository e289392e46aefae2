"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import functools
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.logging import RichHandler

from .application.services.media_upload_service import MediaUploadService
from .application.use_cases.upload_image import UploadImageUseCase
from .core.cropper import ImageCropper
from .core.transformer import guess_mime_type, load_image, resize_to_fit, resize_to_square_avatar
from .domain.models import AvatarOptions, BinaryFile, CropHandle, FitOptions
from .errors import CropError, DecodeError, EncodingError, MediaPrepError, UnsupportedFormatError
from .events.bus import EventBus
from .infrastructure.local_storage import LocalDirectoryBackend
from .settings.manager import SettingsManager

app = typer.Typer(help="Resize, avatar-crop and square-crop images for upload")

SettingsOption = typer.Option(None, "--settings", help="Path to a settings.json file")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except UnsupportedFormatError as exc:
            typer.echo(f"Skipped: {exc}", err=True)
            raise typer.Exit(2) from exc
        except (DecodeError, EncodingError, CropError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except MediaPrepError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _load_settings(path: Optional[Path]) -> SettingsManager:
    manager = SettingsManager(path)
    manager.load()
    return manager


def _write_output(data: bytes, input_path: Path, name: str, output: Optional[Path]) -> Path:
    target = output or input_path.with_name(name)
    target.write_bytes(data)
    return target


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


@app.command()
@_handle_errors
def fit(
    source: Path = typer.Argument(..., exists=True, dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
    max_width: Optional[int] = typer.Option(None, min=1),
    max_height: Optional[int] = typer.Option(None, min=1),
    quality: Optional[float] = typer.Option(None, min=0.0, max=1.0),
    settings: Optional[Path] = SettingsOption,
) -> None:
    """Shrink an image to fit within the display bounds and re-encode it."""

    defaults = _load_settings(settings).fit_options()
    options = FitOptions(
        max_width=max_width or defaults.max_width,
        max_height=max_height or defaults.max_height,
        quality=defaults.quality if quality is None else quality,
        output_format=defaults.output_format,
    )

    async def run() -> BinaryFile:
        image = await load_image(source.read_bytes(), source.name)
        return await resize_to_fit(image, options)

    result = asyncio.run(run())
    target = _write_output(result.data, source, result.name, output)
    print(f"[green]Wrote {target} ({result.size / 1024:.1f}KB)")


@app.command()
@_handle_errors
def avatar(
    source: Path = typer.Argument(..., exists=True, dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
    size: Optional[int] = typer.Option(None, min=1, help="Side of the square avatar"),
    quality: Optional[float] = typer.Option(None, min=0.0, max=1.0),
    settings: Optional[Path] = SettingsOption,
) -> None:
    """Cover-fill and center-crop an image into a square avatar."""

    defaults = _load_settings(settings).avatar_options()
    options = AvatarOptions(
        target_size=size or defaults.target_size,
        quality=defaults.quality if quality is None else quality,
        output_format=defaults.output_format,
    )

    async def run() -> BinaryFile:
        image = await load_image(source.read_bytes(), source.name)
        return await resize_to_square_avatar(image, options)

    result = asyncio.run(run())
    target = _write_output(result.data, source, result.name, output)
    print(f"[green]Wrote {options.target_size}x{options.target_size} avatar to {target}")


@app.command()
@_handle_errors
def crop(
    source: Path = typer.Argument(..., exists=True, dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
    container_width: float = typer.Option(800.0, min=1.0),
    container_height: float = typer.Option(600.0, min=1.0),
    dx: float = typer.Option(0.0, help="Horizontal drag of the crop box"),
    dy: float = typer.Option(0.0, help="Vertical drag of the crop box"),
    grow: float = typer.Option(0.0, help="Pixels to enlarge (or shrink, if negative) the box at --handle"),
    handle: CropHandle = typer.Option(CropHandle.BOTTOM_RIGHT),
    settings: Optional[Path] = SettingsOption,
) -> None:
    """Simulate the square cropper: place, drag, resize and commit."""

    cropper = ImageCropper(min_size=_load_settings(settings).min_crop_size())

    async def run() -> BinaryFile:
        image = await load_image(source.read_bytes(), source.name)
        cropper.init(image.natural_size, (container_width, container_height))
        if dx or dy:
            cropper.drag(dx, dy)
        if grow:
            # positive --grow enlarges the box whichever corner is dragged
            cropper.resize(-grow if handle.is_left else grow, -grow if handle.is_top else grow, handle)
        data_uri = await cropper.commit(image)
        return ImageCropper.to_binary_file(data_uri, f"{source.stem}_crop.jpg")

    result = asyncio.run(run())
    rect = cropper.crop_params
    target = _write_output(result.data, source, result.name, output)
    print(f"[green]Cropped {rect.width:.0f}px square at ({rect.x:.0f}, {rect.y:.0f}) to {target}")


@app.command()
@_handle_errors
def upload(
    source: Path = typer.Argument(..., exists=True, dir_okay=False),
    store: Path = typer.Option(..., "--store", help="Directory that receives uploads"),
    user: str = typer.Option(..., "--user", help="Uploading user id"),
    profile: str = typer.Option("post", help="post, ticket or avatar"),
    base_url: Optional[str] = typer.Option(None, help="Public URL prefix for stored files"),
    settings: Optional[Path] = SettingsOption,
) -> None:
    """Process an image with a profile and store it in a local directory."""

    manager = _load_settings(settings)
    use_case = UploadImageUseCase(
        LocalDirectoryBackend(store, base_url),
        EventBus(),
        fallback_to_original=manager.fallback_to_original(),
    )
    service = MediaUploadService(use_case, manager.profiles())
    file = BinaryFile(name=source.name, mime_type=guess_mime_type(source.name), data=source.read_bytes())
    try:
        response = asyncio.run(service.upload(profile, file, user))
    except KeyError as exc:
        typer.echo(f"Error: {exc.args[0]}", err=True)
        raise typer.Exit(1) from exc
    if not response.success:
        typer.echo(f"Upload failed: {response.error}", err=True)
        raise typer.Exit(1)
    print(f"[green]Uploaded to {response.public_url}")


if __name__ == "__main__":
    app()
