# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the AppHostGen documentation."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

project = "AppHostGen"
author = "AppHostGen Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]

napoleon_google_docstring = True
napoleon_numpy_docstring = False
autodoc_member_order = "bysource"

html_theme = "alabaster"
