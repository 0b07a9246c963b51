"""
esbuild bundler - drives the esbuild binary through subprocess.

Script entry: bundle + minify + tree shaking, JSX via React.createElement.
Style entries: minify only.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from errors import BundlingFailure
from models import BuildConfig


class EsbuildBundler:
    """
    One esbuild process per entry point, run to completion before the next.
    """

    def __init__(self, config: Optional[BuildConfig] = None, binary: str = None):
        self.config = config or BuildConfig()
        self.binary = self.resolve_binary(
            binary or os.getenv("ESBUILD_BINARY") or self.config.esbuild_binary
        )
        self.cwd = self.config.root_path.absolute()

    def resolve_binary(self, binary: str) -> str:
        """Bare names are looked up on PATH, paths hang off the site root"""
        if "/" not in binary and os.sep not in binary:
            return binary
        path = Path(binary)
        if not path.is_absolute():
            path = self.config.root_path / path
        return str(path.absolute())

    def script_command(self, entry_point: Path, outfile: Path) -> List[str]:
        config = self.config
        return [
            self.binary,
            str(Path(entry_point).absolute()),
            "--bundle",
            "--minify",
            "--tree-shaking=true",
            f"--outfile={Path(outfile).absolute()}",
            "--loader:.js=jsx",
            f'--define:process.env.NODE_ENV="{config.node_env}"',
            f"--jsx-factory={config.jsx_factory}",
            f"--jsx-fragment={config.jsx_fragment}",
        ]

    def style_command(self, entry_point: Path, outfile: Path) -> List[str]:
        return [
            self.binary,
            str(Path(entry_point).absolute()),
            "--minify",
            f"--outfile={Path(outfile).absolute()}",
            "--loader:.css=css",
        ]

    def bundle_script(self, entry_point: Path, outfile: Path) -> Path:
        return self._run(self.script_command(entry_point, outfile), entry_point, outfile)

    def bundle_style(self, entry_point: Path, outfile: Path) -> Path:
        return self._run(self.style_command(entry_point, outfile), entry_point, outfile)

    def _run(self, cmd: List[str], entry_point: Path, outfile: Path) -> Path:
        if shutil.which(self.binary) is None:
            raise BundlingFailure(
                entry_point,
                f"'{self.binary}' not found (install esbuild or set ESBUILD_BINARY)",
            )
        if not Path(entry_point).exists():
            raise BundlingFailure(entry_point, "entry point does not exist")

        print(f"[Build]   esbuild {Path(entry_point).name} -> {Path(outfile).name}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, cwd=str(self.cwd))
        except OSError as e:
            raise BundlingFailure(entry_point, str(e)) from e

        if result.returncode != 0:
            raise BundlingFailure(
                entry_point, f"esbuild exited with {result.returncode}", result.stderr
            )
        if not Path(outfile).exists():
            raise BundlingFailure(entry_point, f"no output written to {outfile}", result.stderr)
        return Path(outfile)
