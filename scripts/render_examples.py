#!/usr/bin/env python3
"""Batch render every example topo to SVG and PNG.

Outputs go to /tmp/phototopo_renders/.

Usage:
    python scripts/render_examples.py [--theme classic] [--editable]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from phototopo.errors import TopoError  # noqa: E402
from phototopo.parser import label_from_data, load_document  # noqa: E402
from phototopo.render import render_svg  # noqa: E402
from phototopo.themes import THEMES  # noqa: E402
from phototopo.topo import Topo  # noqa: E402

OUTPUT_DIR = Path("/tmp/phototopo_renders")
EXAMPLES_DIR = project_root / "examples"


def render_file(
    json_path: Path, output_dir: Path, theme: str, *, editable: bool = False
) -> tuple[str, list[str]]:
    """Load and render one topo document to SVG (and optionally PNG).

    Returns (name, list_of_issues).
    """
    name = json_path.stem
    issues: list[str] = []

    try:
        options = load_document(json_path)
        options["get_label"] = label_from_data
        options["editable"] = editable
        topo = Topo(options)
    except TopoError as e:
        return name, [f"LOAD ERROR: {e}"]

    issues.extend(topo.load_warnings)
    svg_str = render_svg(topo, THEMES[theme])

    svg_path = output_dir / f"{name}.svg"
    svg_path.write_text(svg_str)

    # Try PNG conversion via cairosvg (optional)
    try:
        import cairosvg

        png_path = output_dir / f"{name}.png"
        cairosvg.svg2png(bytestring=svg_str.encode(), write_to=str(png_path), scale=2)
    except ImportError:
        issues.append("cairosvg not available, skipping PNG")
    except Exception as e:
        issues.append(f"PNG conversion error: {e}")

    return name, issues


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--theme", choices=sorted(THEMES), default="classic")
    parser.add_argument("--editable", action="store_true", help="Draw edit handles")
    args = parser.parse_args()

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    failures = 0
    for json_path in sorted(EXAMPLES_DIR.glob("*.json")):
        name, issues = render_file(json_path, OUTPUT_DIR, args.theme, editable=args.editable)
        status = "OK" if not issues else f"{len(issues)} issue(s)"
        print(f"{name}: {status}")
        for issue in issues:
            print(f"  - {issue}")
            if "ERROR" in issue:
                failures += 1

    print(f"\nOutput: {OUTPUT_DIR}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
