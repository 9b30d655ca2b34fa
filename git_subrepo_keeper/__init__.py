"""
git-subrepo-keeper - Keep folders in sync with their own repositories via git subtree
"""

from .__version__ import __version__
from .core import SubrepoKeeper
from .cli.main import main

__all__ = ["SubrepoKeeper", "main", "__version__"]
