"""
Puts the repository root on the search path so the Pulumi program can import
the shared `modules` and `utils` packages without installing them.

In CI the repository is installed (`pip install -e .`) and `CI=true`, so the
path is left alone there.

https://docs.python.org/3/using/cmdline.html#envvar-PYTHONPATH
"""

from pathlib import Path
import sys
import os

if os.environ.get("CI") != "true":
    repo_root = str(Path(__file__).resolve().parents[1])
    if repo_root not in sys.path:
        sys.path.append(repo_root)
