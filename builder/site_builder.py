#!/usr/bin/env python3
"""
Production build - dev single-page site in, dist/ out.

Flow:
1. Clean dist/, recreate it with assets/ and vendors/
2. Copy static files verbatim (assets/, vendors/, the font)
3. Pull the inline script out of index.html into src/app.js
4. Rewrite index.html for production -> dist/index.html
5. esbuild the script once and each stylesheet once

Everything runs in sequence. Any failure stops the build;
main() is the one place errors are caught.

Usage: python builder/site_builder.py [--root DIR] [--out DIR] [--config FILE] [--report FILE] [--init]
"""

import argparse
import sys
import time
import traceback
from pathlib import Path
from typing import List, Optional

from bundler import EsbuildBundler
from errors import BuildError, FilesystemFailure, MissingSourceDocument
from fs_gateway import FileSystem
from html_transform import build_rules, process
from models import BuildConfig, BuildReport, TransformResult
from reporter import collect_artifacts, print_report, unresolved_references


CONFIG_FILENAME = "sitebuild.json"


class SiteBuilder:
    """
    Runs the build steps in order.
    Filesystem and bundler are injectable so tests can swap them out.
    """

    def __init__(self, config: BuildConfig = None, fs: FileSystem = None, bundler=None):
        self.config = config or BuildConfig()
        self.fs = fs or FileSystem(self.config.root_path)
        self.bundler = bundler or EsbuildBundler(self.config)
        self.rules = build_rules(self.config)
        # Output dir as the gateway sees it (relative to root unless absolute)
        self.out = Path(self.config.output_dir)

    def build(self, skip_bundle: bool = False) -> BuildReport:
        started = time.time()
        print(f"[Build] Building {self.fs.resolve(self.config.source_document)} -> {self.fs.resolve(self.out)}/")

        self.prepare_output()
        self.copy_static()

        result = self.transform_document()
        print(f"[Build] Writing {self.out / self.config.source_document}")
        self.fs.write(self.out / self.config.source_document, result.document)

        if skip_bundle:
            print("[Build] ⚠️  Skipping esbuild (--skip-bundle)")
        else:
            self.bundle()

        output_dir = self.fs.resolve(self.out)
        report = BuildReport(
            output_dir=str(output_dir),
            artifacts=collect_artifacts(output_dir),
            missing_anchors=result.missing_anchors,
            unresolved_references=unresolved_references(result.document, output_dir),
            duration=time.time() - started,
        )
        return report

    def check_output_dir(self):
        """
        Refuse an output dir that would take sources down with it:
        the root itself, any parent of it, or one of the copied dirs.
        """
        out = self.fs.resolve(self.out).resolve()
        root = self.fs.root.resolve()

        if out == root or root.is_relative_to(out):
            raise FilesystemFailure(
                "clean", out,
                ValueError(f"output dir contains the site root {root}"),
            )
        for dirname in self.config.copy_dirs:
            source = self.fs.resolve(dirname).resolve()
            if out == source or out.is_relative_to(source):
                raise FilesystemFailure(
                    "clean", out,
                    ValueError(f"output dir is inside copied dir {source}"),
                )

    def prepare_output(self):
        """Wipe the previous build, recreate the output skeleton"""
        self.check_output_dir()
        print(f"[Build] Cleaning {self.out}/")
        self.fs.remove_tree(self.out)
        self.fs.make_dirs(self.out)
        for dirname in self.config.copy_dirs:
            self.fs.make_dirs(self.out / dirname)

    def copy_static(self):
        """Copy directories and the font as-is, skipping what isn't there"""
        for dirname in self.config.copy_dirs:
            if self.fs.exists(dirname):
                self.fs.copy_tree(dirname, self.out / dirname)
                print(f"[Build]   ✓ Copied {dirname}/")

        font = self.config.font_file
        if self.fs.exists(font):
            self.fs.copy(font, self.out / font)
            print(f"[Build]   ✓ Copied {font}")

    def read_source(self) -> str:
        source = self.config.source_document
        if not self.fs.exists(source):
            raise MissingSourceDocument(self.fs.resolve(source))
        try:
            return self.fs.read(source)
        except FilesystemFailure as e:
            raise MissingSourceDocument(self.fs.resolve(source), "is unreadable") from e

    def transform_document(self) -> TransformResult:
        """Extract the payload and persist it before anything gets bundled"""
        source = self.read_source()
        result = process(source, self.rules)

        self.fs.write(self.config.script_entry, result.payload)
        print(f"[Build]   ✓ Extracted inline script -> {self.config.script_entry} ({len(result.payload):,} chars)")

        for name in result.missing_anchors:
            print(f"[Build]   ⚠️  Rule '{name}' found nothing to rewrite")
        return result

    def bundle(self):
        print("[Build] Bundling...")
        self.bundler.bundle_script(
            self.fs.resolve(self.config.script_entry),
            self.fs.resolve(self.out / self.config.script_output),
        )
        for source, minified in self.config.style_entries.items():
            self.bundler.bundle_style(
                self.fs.resolve(source),
                self.fs.resolve(self.out / minified),
            )


def load_config(args) -> BuildConfig:
    """--config file (must exist) or sitebuild.json in the root (optional)"""
    root = Path(args.root) if args.root else Path(".")

    if args.config:
        if not Path(args.config).exists():
            raise FileNotFoundError(f"Config file {args.config} not found")
        config = BuildConfig.load(args.config)
    else:
        config = BuildConfig.load(str(root / CONFIG_FILENAME))

    if args.root:
        config.root = args.root
    if args.out:
        config.output_dir = args.out
    return config


def init_config(root: Path) -> int:
    """Write the default sitebuild.json into the root, never over an existing one"""
    path = root / CONFIG_FILENAME
    if path.exists():
        print(f"⚠️  {path} already exists, leaving it alone")
        return 0
    try:
        BuildConfig().save(str(path))
    except OSError as e:
        print(f"✗ {FilesystemFailure('write', path, e)}", file=sys.stderr)
        return 1
    print(f"✓ Created default config at {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Build the production version of the site into dist/")
    parser.add_argument("--root", type=str, default=None, help="Site source directory (default: .)")
    parser.add_argument("--out", type=str, default=None, help="Output directory (default: <root>/dist)")
    parser.add_argument("--config", type=str, default=None, help=f"JSON config file (default: <root>/{CONFIG_FILENAME} if present)")
    parser.add_argument("--skip-bundle", action="store_true", help="Only copy files and rewrite HTML, don't run esbuild")
    parser.add_argument("--report", type=str, default=None, help="Also write the build report as JSON to this file (relative to root)")
    parser.add_argument("--init", action="store_true", help=f"Write a default {CONFIG_FILENAME} into the root and exit")
    args = parser.parse_args(argv)

    if args.init:
        return init_config(Path(args.root or "."))

    try:
        config = load_config(args)
        report = SiteBuilder(config).build(skip_bundle=args.skip_bundle)
        if args.report:
            report_path = Path(args.report)
            if not report_path.is_absolute():
                report_path = config.root_path / report_path
            try:
                report.save(str(report_path))
            except OSError as e:
                raise FilesystemFailure("write", report_path, e) from e
    except BuildError as e:
        print(f"✗ Build failed: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"✗ Build failed: {e}", file=sys.stderr)
        traceback.print_exc()
        return 1

    print_report(report, config.suggestions)
    return 0


if __name__ == "__main__":
    sys.exit(main())
