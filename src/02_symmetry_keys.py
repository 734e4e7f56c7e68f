"""
Teaching module 02: Symmetry-aware table keys.

What you learn here:
- The 8 images of a state/action pair under rotation and mirroring.
- Why a new position keeps its own key and later symmetric variants reuse it.

Run:
  python src/02_symmetry_keys.py --demo
"""
import argparse

from xo.symmetry import canonical_key, literal_hash, orbit


def demo() -> None:
    state, action = tuple("X___O____"), 6
    for kind, key in orbit(state, action):
        print(f"{kind:>14}: {key}")

    known = set()
    for kind, key in orbit(state, action):
        s, a = tuple(key[:9]), int(key[9])
        resolved = canonical_key(s, a, known)
        known.add(resolved)
        print(f"{literal_hash(s, a)} -> {resolved}")
    print(f"distinct keys written: {len(known)}")


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Module 02: Symmetry keys")
    ap.add_argument('--demo', action='store_true')
    args = ap.parse_args()
    if args.demo:
        demo()
