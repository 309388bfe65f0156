"""
Whitelist file loading.

The whitelist is a YAML document with two top-level mappings:

    generalwhitelist:
      CVE-2017-6055: XML
    images:
      ubuntu:
        CVE-2017-5230: XSX
"""

import logging
from pathlib import Path

import yaml

from core.exceptions import WhitelistException
from core.models import Whitelist

logger = logging.getLogger(__name__)

GENERAL_KEY = "generalwhitelist"
IMAGES_KEY = "images"


def _string_mapping(data, section: str) -> dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise WhitelistException(f"'{section}' must be a mapping")
    return {str(key): "" if value is None else str(value) for key, value in data.items()}


def parse_whitelist(data) -> Whitelist:
    """
    Build a Whitelist from decoded YAML.

    Args:
        data: Decoded document (None for an empty file)

    Returns:
        Whitelist value

    Raises:
        WhitelistException: If the document has the wrong shape
    """
    if data is None:
        return Whitelist.empty()
    if not isinstance(data, dict):
        raise WhitelistException("Whitelist must be a mapping")

    general = _string_mapping(data.get(GENERAL_KEY), GENERAL_KEY)

    raw_images = data.get(IMAGES_KEY) or {}
    if not isinstance(raw_images, dict):
        raise WhitelistException(f"'{IMAGES_KEY}' must be a mapping")
    images = {
        str(image): _string_mapping(entries, f"{IMAGES_KEY}.{image}")
        for image, entries in raw_images.items()
    }

    return Whitelist(general=general, images=images)


def load_whitelist(path: Path) -> Whitelist:
    """
    Load a whitelist file.

    Args:
        path: Path to the YAML whitelist

    Returns:
        Whitelist value

    Raises:
        WhitelistException: If the file is missing or invalid
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise WhitelistException(f"Whitelist file not found: {path}")
    except yaml.YAMLError as e:
        raise WhitelistException(f"Invalid YAML in whitelist {path}: {e}") from e
    except OSError as e:
        raise WhitelistException(f"Could not read whitelist {path}: {e}") from e

    whitelist = parse_whitelist(data)
    logger.debug(
        f"Loaded whitelist from {path}: {len(whitelist.general)} general entries, "
        f"{len(whitelist.images)} images"
    )
    return whitelist
