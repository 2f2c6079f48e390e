"""Print the outline of an essay.

Lists sections (pinned one marked), heading groups with their blocks, word
counts, and linked notes not yet used as sections.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the outline of an essay")
    parser.add_argument("vault", help="Path to the vault folder")
    parser.add_argument("essay", help="Vault-relative path of the essay")
    parser.add_argument("--blocks", action="store_true", help="Also list blocks under each heading")
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
        outline = editor.outline()
        related = editor.related_notes()
    except (DocumentNotFound, ValueError) as e:
        print(str(e))
        return 2

    counts = {c.heading: c.words for c in outline.stats.sections}
    print(f"essay: {args.essay}")
    print(f"sections: {len(outline.sections)}")
    for i, section in enumerate(outline.sections):
        marker = "pinned" if section.pinned else f"{counts.get(section.heading, 0)} words"
        print(f"  [{i}] {section.heading} ({marker})")

    if args.blocks:
        blocks = outline.blocks
        for idx in outline.grouped.orphans:
            print(f"  - {blocks[idx].kind}: {blocks[idx].preview}")
        for group in outline.grouped.groups:
            print(f"  # {blocks[group.header].preview}")
            for idx in group.children:
                source = f" <{blocks[idx].attribution}>" if blocks[idx].attribution else ""
                print(f"    - {blocks[idx].kind}: {blocks[idx].preview}{source}")

    print(f"total_words: {outline.stats.total_words}")
    print(f"related_notes: {len(related)}")
    for path in related:
        print(f"  {path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
