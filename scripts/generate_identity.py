#!/usr/bin/env python3
"""
Generate identity handles for ledger actors.
Creates random address-style handles usable as caller identities.
"""

import secrets


def generate_identity(prefix="0x", length=40):
    """Generate a random hex handle."""
    return prefix + secrets.token_hex(length // 2)


def generate_multiple_identities(count=5):
    """Generate multiple identity handles."""
    return [generate_identity() for _ in range(count)]


if __name__ == "__main__":
    print("=" * 70)
    print("MedLedger Identity Generator")
    print("=" * 70)
    print()

    for role in ("hospital", "doctor", "patient"):
        print(f"{role.title()}:")
        print("-" * 70)
        for identity in generate_multiple_identities(2):
            print(f"  {identity}")
        print()

    print("Use one as the caller, e.g. the CLI 'login <identity>' command or the")
    print("X-Caller-Identity header of the REST API.")
