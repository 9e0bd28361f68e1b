#!/usr/bin/env python3
"""
Generate an off-chain Sui address and check that its key round-trips.
"""
from suiwallet_sdk import WalletClient, derive_identity


def main():
    generated = WalletClient.generate_address()
    print(f"Address:     {generated.wallet_address}")
    print(f"Private key: {generated.private_key}")

    # the address is a pure function of the key
    assert derive_identity(generated.private_key).address == generated.wallet_address
    print("Fund this address before using it on-chain.")


if __name__ == "__main__":
    main()
