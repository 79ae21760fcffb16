"""File-based prompt templates loaded by logical name.

Features:
- Jinja2 templates stored next to this module (``<name>.j2``)
- Loading by logical name (e.g. "chunk/user_v1")
- In-memory caching to avoid repeated disk I/O
- SHA256 hashes of template sources for run metadata
"""

from __future__ import annotations

import os
from functools import lru_cache
from hashlib import sha256
from pathlib import Path
from typing import Any, Dict

from jinja2 import StrictUndefined, Template

# Root directory where prompt templates live.
# Can be overridden via environment variable PROMPT_DIR
_PROMPT_DIR = Path(__file__).resolve().parent


class PromptNotFoundError(FileNotFoundError):
    """Raised when a requested prompt template is not found on disk."""


def set_prompt_dir(path: str | Path) -> None:
    """Set the root directory for prompt templates.

    Args:
        path: Path to prompt directory
    """
    global _PROMPT_DIR
    _PROMPT_DIR = Path(path).resolve()
    _load_template.cache_clear()


def get_prompt_dir() -> Path:
    """Return the active prompt directory (PROMPT_DIR wins over the default)."""
    env_prompt_dir = os.getenv("PROMPT_DIR")
    if env_prompt_dir:
        return Path(env_prompt_dir).resolve()
    return _PROMPT_DIR


def _template_path(name: str) -> Path:
    # Allow both "chunk/user_v1" and "chunk/user_v1.j2"
    rel_path = Path(name) if name.endswith(".j2") else Path(name + ".j2")
    return get_prompt_dir() / rel_path


@lru_cache(maxsize=None)
def _load_template(name: str) -> Template:
    """Load and cache a Jinja2 template by logical name.

    Raises:
        PromptNotFoundError: If template file doesn't exist
    """
    path = _template_path(name)
    if not path.exists():
        raise PromptNotFoundError(
            f"Prompt template not found: {path}\n"
            f"  Searched in: {get_prompt_dir()}\n"
            f"  Requested name: {name}"
        )
    return Template(path.read_text(encoding="utf-8"), undefined=StrictUndefined)


def render_prompt(name: str, /, **params: Any) -> str:
    """Render a prompt template with parameters.

    Args:
        name: Logical name, e.g. "chunk/user_v1"
        **params: Template parameters passed to Jinja2 .render()

    Returns:
        Rendered prompt string (stripped of leading/trailing whitespace).

    Raises:
        PromptNotFoundError: If template file doesn't exist
    """
    return _load_template(name).render(**params).strip()


def get_prompt_source(name: str) -> str:
    """Return the raw template source text (without rendering)."""
    path = _template_path(name)
    if not path.exists():
        raise PromptNotFoundError(f"Prompt template not found: {path}")
    return path.read_text(encoding="utf-8")


def hash_text(text: str) -> str:
    """Return a SHA256 hex digest for arbitrary text."""
    return sha256(text.encode("utf-8")).hexdigest()


def get_prompt_metadata(name: str) -> Dict[str, Any]:
    """Return name, relative file and source hash of a prompt template."""
    return {
        "name": name,
        "file": str(_template_path(name).relative_to(get_prompt_dir())),
        "sha256": hash_text(get_prompt_source(name)),
    }


def clear_cache() -> None:
    """Clear the prompt template cache."""
    _load_template.cache_clear()
