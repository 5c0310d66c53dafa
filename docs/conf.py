"""Sphinx configuration for the subbandsuite API and user documentation."""
import os
import sys

sys.path.insert(0, os.path.abspath('../src'))

# -- Project information -----------------------------------------------------

project = 'subbandsuite'
author = 'subbandsuite Developers'
copyright = '2026, ' + author
release = '0.1.0'
version = '0.1'

# -- General configuration ---------------------------------------------------

root_doc = 'index'
source_suffix = {'.rst': 'restructuredtext', '.md': 'markdown'}

extensions = [
    "autoapi.extension",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.mathjax",
    "myst_parser",
]

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

# numpy-style docstrings throughout the package
napoleon_google_docstring = False
napoleon_numpy_docstring = True

# -- Options for HTML output -------------------------------------------------

html_theme = 'sphinx_rtd_theme'

# -- AutoAPI configuration ---------------------------------------------------

autoapi_type = 'python'
autoapi_dirs = ['../src/subbandsuite']
autoapi_root = 'api'
autoapi_options = [
    "members",
    "undoc-members",
    "show-inheritance",
    "show-module-summary",
]
autoapi_add_toctree_entry = True
