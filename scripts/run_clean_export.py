"""Export an essay as clean text.

Local/offline helper:
- drops the pinned Sources section
- removes attribution links and unwraps wikilinks
- prints the result (or writes it to --output) with its word count
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main() -> int:
    parser = argparse.ArgumentParser(description="Export an essay as clean text")
    parser.add_argument("vault", help="Path to the vault folder")
    parser.add_argument("essay", help="Vault-relative path of the essay (e.g. Essays/Draft.md)")
    parser.add_argument(
        "--no-headings",
        action="store_true",
        help="Drop section headings from the export (default: keep them)",
    )
    parser.add_argument("--output", default=None, help="Write the export to this file instead of stdout")
    args = parser.parse_args()

    # Allow running this script directly without requiring installation.
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

    from cairn.errors import DocumentNotFound
    from cairn.essay import EssayEditor
    from cairn.storage import Reconciler, VaultStore

    try:
        editor = EssayEditor(Reconciler(VaultStore(args.vault)), args.essay)
        result = editor.export(include_headings=False if args.no_headings else None)
    except (DocumentNotFound, ValueError) as e:
        print(str(e))
        return 2

    if args.output:
        Path(args.output).write_text(result.text + "\n", encoding="utf-8")
        print(f"output: {args.output}")
    else:
        print(result.text)
    print(f"word_count: {result.word_count}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
