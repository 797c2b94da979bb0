# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Name conversions between resource names and generated C# text."""

from __future__ import annotations

import re

# ###############
# Public Interface
# ###############


def to_variable_name(name: str) -> str:
    """Convert a resource name into a camelCase C# local variable name.

    Runs of non-alphanumeric characters separate words. The first word is
    lower-cased and each following word is capitalised. A leading digit is
    prefixed with ``n``; an empty result becomes ``resource``.

    Examples:
        >>> to_variable_name("order-service")
        'orderService'
        >>> to_variable_name("2fa")
        'n2fa'
    """
    words = [w for w in _NON_ALNUM_RE.split(name) if w]
    converted = "".join(word.lower() if index == 0 else word.capitalize() for index, word in enumerate(words))
    if converted[:1].isdigit():
        converted = "n" + converted
    return converted or "resource"


def capitalize_first(text: str) -> str:
    """Upper-case the first character of *text* and leave the rest alone."""
    return text[:1].upper() + text[1:]


def suggest_identifier(name: str) -> str:
    """Return a valid identifier close to *name* for use in validation suggestions."""
    result = _NON_IDENT_RE.sub("_", name)
    if result[:1].isdigit():
        result = "_" + result
    return result or "resource"


def suggest_env_key(key: str) -> str:
    """Return the upper-snake-case form of an environment variable key."""
    return re.sub(r"[^A-Z0-9]", "_", key.upper())


def container_image_name(name: str) -> str:
    """Return the image path segment used for a container resource called *name*.

    Image references only allow lower-case alphanumerics joined by single
    separators, so the name is lower-cased and every other run of characters
    collapses to one underscore.
    """
    image = _NON_IMAGE_RE.sub("_", name.lower()).strip("_")
    return image or "container"


def sanitize_service_name(name: str) -> str:
    """Replace the ``-`` and ``.`` separators common in service names with ``_``."""
    return re.sub(r"[-.]", "_", name)


# ################
# Implementation
# ################

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")
_NON_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")
_NON_IMAGE_RE = re.compile(r"[^a-z0-9]+")
