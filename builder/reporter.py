"""
Build report - what ended up in dist/, how big it is,
and which local references in index.html point at nothing.
"""

from pathlib import Path
from typing import List
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from models import Artifact, BuildReport


REFERENCE_ATTRS = ("src", "href")


def collect_artifacts(output_dir: Path) -> List[Artifact]:
    """Every file in the output tree, largest first"""
    output_dir = Path(output_dir)
    artifacts = [
        Artifact(path=p.relative_to(output_dir).as_posix(), size=p.stat().st_size)
        for p in output_dir.rglob("*")
        if p.is_file()
    ]
    artifacts.sort(key=lambda a: (-a.size, a.path))
    return artifacts


def _is_local(reference: str) -> bool:
    if not reference or reference.startswith(("#", "//")):
        return False
    parsed = urlparse(reference)
    return not parsed.scheme and not parsed.netloc


def unresolved_references(html: str, output_dir: Path) -> List[str]:
    """
    Local src/href values in the production HTML with no file behind them.
    External URLs (CDN, mailto:, data:) are ignored.
    """
    output_dir = Path(output_dir)
    soup = BeautifulSoup(html, 'lxml')

    missing = set()
    for attr in REFERENCE_ATTRS:
        for tag in soup.find_all(attrs={attr: True}):
            reference = tag[attr].strip()
            if not _is_local(reference):
                continue
            path = unquote(urlparse(reference).path).lstrip("/")
            if not path:
                continue
            if not (output_dir / path).exists():
                missing.add(reference)
    return sorted(missing)


def format_size(size: int) -> str:
    """Human readable size, du -h style"""
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


def print_report(report: BuildReport, suggestions: List[str] = None):
    """Success banner, sizes, warnings and the manual follow-ups"""
    print(f"\n✅ Build succeeded! Open {report.output_dir}/index.html")
    print(f"   Finished in {report.duration:.2f}s")

    if report.artifacts:
        print(f"\n📦 Output ({len(report.artifacts)} files, {format_size(report.total_size)}):")
        for artifact in report.artifacts:
            print(f"   {format_size(artifact.size):>10}  {artifact.path}")

    if report.missing_anchors:
        print("\n⚠️  Rewrite rules that matched nothing:")
        for name in report.missing_anchors:
            print(f"   - {name}")

    if report.unresolved_references:
        print("\n⚠️  References with no file in the output:")
        for reference in report.unresolved_references:
            print(f"   - {reference}")

    if suggestions:
        print("\nFurther optimizations:")
        for idx, suggestion in enumerate(suggestions, 1):
            print(f"{idx}. {suggestion}")
