#!/usr/bin/env python3
"""
Simple example of a funded SUI transfer.
"""
import os
import sys

from suiwallet_sdk import TransferConfig, WalletClient


def main():
    """
    Demonstrate basic usage of the WalletClient.

    This example shows how to:
    1. Build the configuration from the environment
    2. Send an amount in SUI to a recipient address
    3. Print the outcome and an explorer link
    """
    recipient = os.environ.get("RECIPIENT_ADDRESS")
    amount = os.environ.get("AMOUNT_SUI", "0.006")

    if not recipient:
        print("ERROR: RECIPIENT_ADDRESS environment variable is required")
        return 1

    if not os.environ.get("PRIVATE_KEY"):
        print("ERROR: PRIVATE_KEY environment variable is required")
        return 1

    client = WalletClient(TransferConfig.from_env())

    outcome = client.transfer(recipient, amount, unit="sui")
    if outcome.success:
        print("Transfer succeeded!")
        print(f"Sender: {outcome.sender_address}")
        print(f"Digest: {outcome.transaction_digest}")
        print(f"Explorer: {client.tx_url(outcome.transaction_digest)}")
        return 0

    print(f"Transfer failed: {outcome.error}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
