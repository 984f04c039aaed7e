from pathlib import Path
import sys

import matplotlib

matplotlib.use("Agg")

repo_root = Path(__file__).resolve().parents[1]
# Make `src.groundwater...` importable without installing the project.
root_str = str(repo_root)
if root_str not in sys.path:
	sys.path.insert(0, root_str)
