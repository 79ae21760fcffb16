"""Command-line interface for video_digest."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from pydantic import ValidationError

from . import __version__, config, config_constants
from .utils.log_config import apply_log_level

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .service import ServiceResult

_LOGGER = logging.getLogger(__name__)

OUTPUT_FORMATS = ("json", "markdown")

# CLI option -> (Config field, alias that a config file may use instead)
_CONFIG_OVERRIDES = {
    "provider": ("generation_provider", None),
    "chunk_size": ("chunk_size", "unit_size"),
    "max_chunks": ("max_chunks", "max_units"),
    "concurrency": ("concurrency_limit", None),
    "timeout": ("request_timeout_seconds", None),
    "log_level": ("log_level", None),
    "log_file": ("log_file", None),
}


def _add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("video", nargs="?", default=None, help="YouTube video id or URL")
    parser.add_argument("--config", default=None, help="Path to configuration file (JSON or YAML)")
    parser.add_argument(
        "--provider",
        choices=(
            config_constants.GENERATION_PROVIDER_GROQ,
            config_constants.GENERATION_PROVIDER_OPENAI,
        ),
        default=None,
        help="Generation provider (default: groq)",
    )
    parser.add_argument("--chunk-size", type=int, default=None, help="Words per chunk")
    parser.add_argument("--max-chunks", type=int, default=None, help="Maximum number of chunks")
    parser.add_argument(
        "--concurrency", type=int, default=None, help="Maximum chunk summaries in flight"
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Timeout for each generation call (seconds)"
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="markdown",
        help="Output format (default: markdown)",
    )
    parser.add_argument("--output", default=None, help="Write the article to this file")
    parser.add_argument("--log-level", default=None, help="Logging level (e.g., DEBUG, INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("--version", action="store_true", help="Show program version and exit")


def validate_args(args: argparse.Namespace) -> None:
    """Validate parsed CLI arguments.

    Raises:
        ValueError: With every validation problem joined into one message
    """
    errors: List[str] = []
    if not args.video:
        errors.append("Video id or URL is required")
    for name in ("chunk_size", "max_chunks", "concurrency"):
        value = getattr(args, name)
        if value is not None and value <= 0:
            errors.append(f"--{name.replace('_', '-')} must be positive")
    if args.timeout is not None and args.timeout <= 0:
        errors.append("--timeout must be positive")
    if errors:
        raise ValueError("Invalid input parameters:\n  " + "\n  ".join(errors))


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Turn a YouTube video transcript into a structured article."
    )
    _add_arguments(parser)
    args = parser.parse_args(argv)

    if args.version:
        print(f"video_digest {__version__}")
        raise SystemExit(0)

    validate_args(args)
    return args


def _build_config(args: argparse.Namespace) -> config.Config:
    """Merge the optional config file with CLI overrides into a Config."""
    payload: Dict[str, Any] = {}
    if args.config:
        payload.update(config.load_config_file(args.config))

    for option, (field_name, alias) in _CONFIG_OVERRIDES.items():
        value = getattr(args, option)
        if value is None:
            continue
        if alias:
            payload.pop(alias, None)
        payload[field_name] = value
    return config.Config.model_validate(payload)


def _render_article(result: "ServiceResult", output_format: str) -> str:
    article = result.article
    if article is None:
        return ""
    if output_format == "json":
        return json.dumps(article.to_dict(), indent=2, ensure_ascii=False) + "\n"
    return article.to_markdown()


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    apply_log_level_fn: Optional[Callable[[str, Optional[str]], None]] = None,
    run_fn: Optional[Callable[[config.Config, str], "ServiceResult"]] = None,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Entry point for the CLI; returns an exit status code."""
    log = logger or _LOGGER
    if apply_log_level_fn is None:
        apply_log_level_fn = apply_log_level
    if run_fn is None:
        from . import service

        run_fn = service.run

    try:
        args = parse_args(argv)
        cfg = _build_config(args)
    except ValidationError as exc:
        log.error("Invalid configuration: %s", exc)
        return 1
    except ValueError as exc:
        log.error("Error: %s", exc)
        return 1

    apply_log_level_fn(cfg.log_level, cfg.log_file)
    log.info("Starting article generation for %s", args.video)
    log.debug(
        "Provider: %s, chunk model: %s, synthesis model: %s, chunk size: %d, "
        "max chunks: %d, concurrency: %d",
        cfg.generation_provider,
        cfg.chunk_model,
        cfg.synthesis_model,
        cfg.chunk_size,
        cfg.max_chunks,
        cfg.concurrency_limit,
    )

    result = run_fn(cfg, args.video)
    if not result.success:
        log.error("Failed (%s): %s", result.http_status, result.error)
        return 1

    if result.truncated:
        log.warning(
            "Transcript was longer than %d chunks; trailing text was skipped", cfg.max_chunks
        )
    if result.used_fallback:
        log.warning("Structured article output was unusable; wrote the fallback article")

    rendered = _render_article(result, args.output_format)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered, encoding="utf-8")
        log.info("Article written to %s", output_path)
    else:
        print(rendered, end="")
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    raise SystemExit(main())
