#!/usr/bin/env python3
"""
Example of using WalletClient with network configuration.
"""
import os

from suiwallet_sdk import NetworkConfig, WalletClient, mist_to_sui


def main():
    """
    Demonstrate network-based configuration and the Wallet module.

    This example shows how to:
    1. List the packaged networks
    2. Initialize the client from a network name
    3. Check a balance and look up the sender's Wallet object
    4. Deposit a coin into that Wallet object
    """
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    PACKAGE_ID = os.environ.get("PACKAGE_ID")
    COIN_OBJECT_ID = os.environ.get("COIN_OBJECT_ID")

    if not PRIVATE_KEY or not PACKAGE_ID:
        print("ERROR: PRIVATE_KEY and PACKAGE_ID environment variables are required")
        return

    print("Available networks:")
    for network_name in NetworkConfig.load_networks().keys():
        print(f"  - {network_name}")
    print()

    network = os.environ.get("SUI_NETWORK", "devnet")
    client = WalletClient.from_network(
        network=network,
        private_key=PRIVATE_KEY,
        package_id=PACKAGE_ID,
        module_name=os.environ.get("MODULE_NAME", "wallet"),
    )

    sender = client.derive_identity()
    print(f"Sender address: {sender.address}")
    print(f"Balance: {mist_to_sui(client.get_balance(sender.address))} SUI")

    wallet_id = client.find_wallet_object(sender.address)
    if wallet_id is None:
        print("No Wallet object yet, creating one...")
        created = client.create_wallet(sender.address)
        if not created.success:
            print(f"Wallet creation failed: {created.error}")
            return
        wallet_id = created.wallet_object_id
    print(f"Wallet object: {wallet_id}")

    if COIN_OBJECT_ID:
        outcome = client.deposit_to_wallet(wallet_id, COIN_OBJECT_ID)
        if outcome.success:
            print(f"Deposited, see {client.tx_url(outcome.transaction_digest)}")
        else:
            print(f"Deposit failed: {outcome.error}")


if __name__ == "__main__":
    main()
