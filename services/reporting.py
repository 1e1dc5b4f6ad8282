from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional


def _fmt(value: Any) -> str:
    return str(value) if value not in (None, "") else "-"


def print_summary(criteria: str, ranked: List[Any], meta: Dict[str, Any],
                  output_path: Optional[Path] = None, top: int = 10) -> None:
    """Print summary of a ranking run."""
    stats = meta.get('validation_stats', {})

    print("\n" + "="*60)
    print("LEAD RELEVANCE - SUMMARY")
    print("="*60)
    print(f"Criteria: {criteria or 'N/A'}")
    print(f"Profiles Built From Search Results: {meta.get('built_profiles', 0)}")
    print(f"Valid Profiles: {stats.get('valid_profiles', 0)}")
    print(f"Invalid Profiles: {stats.get('invalid_profiles', 0)}")
    print(f"Duplicates Removed: {stats.get('duplicates_removed', 0)}")
    print(f"Ranked Profiles: {len(ranked)}")
    if ranked:
        print()
        print(f"Top {min(top, len(ranked))}:")
        for i, p in enumerate(ranked[:top], start=1):
            print(f"  {i:>2}. {p.score:.2f}  {_fmt(p.name)} | {_fmt(p.title)} | {_fmt(p.company)}")
    if output_path:
        print(f"Output File: {output_path}")
    print("="*60)
