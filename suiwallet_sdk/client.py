"""
WalletClient - funded transfer orchestration for Sui.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from enum import Enum
from typing import Optional

from .config import GAS_POLICY_FIXED, NetworkConfig, TransferConfig
from .exceptions import (
    IntegrationError, InsufficientFundsError, InvalidAmountError, InvalidWalletObjectError,
    SimulationRejected, SuiWalletError, TransactionRejected, ValidationError
)
from .identity import KeyPair, derive_identity, generate_keypair, sign_transaction
from .ledger import LedgerTransport, MoveCallInstruction, NativeTransfer, TransferInstruction, get_transport
from .models import GeneratedAddress, ObjectData, TransactionResult, TransferOutcome, WalletCreationOutcome
from .utils import SUI_COIN_OBJECT_TYPE, Amount, parse_amount, validate_address

# Upper bound on owned-object pages scanned when looking for a Wallet object
MAX_OWNED_OBJECT_PAGES = 20

INTERNAL_ERROR_CODE = "InternalError"


class TransferStage(str, Enum):
    VALIDATING = "validating"
    DERIVING = "deriving"
    BUILDING = "building"
    CHECKING_BALANCE = "checking_balance"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class _Progress:
    """Where a single workflow call has got to."""
    stage: TransferStage = TransferStage.VALIDATING
    sender: Optional[str] = None


class WalletClient:
    """
    Client for moving SUI on behalf of a signing key.

    Every transfer runs the same workflow:
    1. Validate the recipient and amount
    2. Derive the sender address from the private key
    3. Build the instruction and resolve its gas budget (fixed or dry-run)
    4. Check that balance covers amount plus gas
    5. Sign, submit and interpret the execution status

    The public workflow methods never raise: failures come back as outcome
    records with ``success=False``. Submissions are never retried; calling
    a workflow twice may move funds twice.
    """

    def __init__(
        self,
        config: Optional[TransferConfig] = None,
        transport: Optional[LedgerTransport] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the WalletClient

        Args:
            config: SDK settings (read from the environment when omitted)
            transport: Ledger transport (JSON-RPC to config.rpc_url when omitted)
            logger: Optional logger instance to use for debug/info logging
        """
        self.config = config or TransferConfig.from_env()
        self.logger = logger or logging.getLogger(__name__)
        self.transport = transport or get_transport(
            self.config.rpc_url,
            retry_count=self.config.retry_count,
            timeout=self.config.timeout
        )

    @classmethod
    def from_network(cls, network: str = "testnet", **kwargs) -> "WalletClient":
        """
        Create a client for a named network from networks.json.

        Args:
            network: Network name, e.g. "testnet"
            **kwargs: Further TransferConfig fields
        """
        return cls(TransferConfig(network=network, **kwargs))

    def tx_url(self, digest: str) -> str:
        """Block explorer URL for a transaction digest"""
        return NetworkConfig.get_tx_url(self.config.network, digest)

    def close(self) -> None:
        self.transport.close()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def derive_identity(self, credential_hex: Optional[str] = None) -> KeyPair:
        """
        Derive the key pair for a hex private key.

        Falls back to the configured default credential when none is given.

        Raises:
            MissingCredentialError, InvalidCredentialLength, InvalidCredentialEncoding
        """
        return derive_identity(credential_hex or self.config.private_key)

    @staticmethod
    def generate_address() -> GeneratedAddress:
        """Create a new off-chain key pair. Fund the address before using it on-chain."""
        keypair = generate_keypair()
        return GeneratedAddress(wallet_address=keypair.address, private_key=keypair.private_key_hex)

    # ------------------------------------------------------------------
    # Balance and gas
    # ------------------------------------------------------------------

    def get_balance(self, address: str) -> int:
        """Total SUI owned by an address, in MIST"""
        address = validate_address(address)
        return self.transport.get_balance(address).total_balance

    def check_sufficiency(self, address: str, required_amount: int, gas_budget: int) -> int:
        """
        Check that an address can cover an amount plus gas.

        Advisory only; the ledger enforces the real check at execution.

        Returns:
            The observed balance in MIST

        Raises:
            InsufficientFundsError: If balance < required_amount + gas_budget
        """
        balance = self.transport.get_balance(address).total_balance
        required = required_amount + gas_budget
        if balance < required:
            raise InsufficientFundsError(balance, required, amount=required_amount, gas_budget=gas_budget)
        self.logger.debug(f"Balance {balance} MIST covers {required} MIST for {address}")
        return balance

    def resolve_gas_budget(self, instruction: TransferInstruction, amount: int = 0) -> int:
        """
        Gas budget for an instruction under the configured policy.

        `amount` is the MIST the instruction moves out of the sender's
        balance; it bounds the provisional budget of a dry run.
        """
        if self.config.gas_policy == GAS_POLICY_FIXED:
            self.logger.debug(f"Using fixed gas budget: {self.config.fixed_gas_budget} MIST")
            return self.config.fixed_gas_budget
        return self.estimate_gas_budget(instruction, amount)

    def estimate_gas_budget(self, instruction: TransferInstruction, amount: int = 0) -> int:
        """
        Estimate gas through a dry run.

        The instruction is built with a provisional cap of the fixed budget,
        lowered to what the balance leaves after `amount`, since a node
        refuses a budget larger than the sender's gas coins. It is then
        simulated and the (computation + storage) cost is inflated by the
        configured margin.

        Raises:
            InsufficientFundsError: If nothing is left for gas after `amount`
            SimulationRejected: If the dry run reports a failure
        """
        balance = self.transport.get_balance(instruction.sender).total_balance
        cap = min(self.config.fixed_gas_budget, balance - amount)
        if cap <= 0:
            # at least one MIST of gas is needed on top of the amount
            raise InsufficientFundsError(balance, amount + 1, amount=amount, gas_budget=1)

        provisional = instruction.with_gas_budget(cap)
        tx_bytes = self.transport.build_transaction(provisional)
        dry_run = self.transport.dry_run(tx_bytes)
        status = dry_run.effects.status
        if not status.ok:
            raise SimulationRejected(f"Dry run failed: {status.error or 'Unknown error'}")

        gross = dry_run.effects.gas_used.gross_cost
        budget = int((Decimal(gross) * self.config.gas_margin).to_integral_value(rounding=ROUND_DOWN))
        budget = max(budget, 1)
        self.logger.debug(f"Estimated gas: {gross} MIST, budget with margin: {budget} MIST")
        return budget

    # ------------------------------------------------------------------
    # Instruction assembly
    # ------------------------------------------------------------------

    def build_transfer_instruction(
        self,
        sender_address: str,
        recipient: str,
        amount: int,
        gas_budget: Optional[int] = None,
        source_wallet_id: Optional[str] = None,
        recipient_is_wallet: bool = False
    ) -> TransferInstruction:
        """
        Describe a transfer without executing it.

        Args:
            sender_address: Address of the signer
            recipient: Recipient address, or destination Wallet object id
            amount: Amount in MIST
            gas_budget: Budget to annotate the instruction with
            source_wallet_id: Wallet object to move value out of; a native
                transfer from the sender's gas coin when omitted
            recipient_is_wallet: Whether `recipient` is a Wallet object id

        Returns:
            NativeTransfer or MoveCallInstruction
        """
        if source_wallet_id is None:
            if recipient_is_wallet:
                raise ValueError("A native transfer cannot target a Wallet object")
            instruction: TransferInstruction = NativeTransfer(
                sender=sender_address, recipient=recipient, amount=amount
            )
        else:
            function = "transfer_to_wallet" if recipient_is_wallet else "transfer_to_address"
            instruction = self._move_call(sender_address, function, source_wallet_id, recipient, str(amount))

        if gas_budget is not None:
            instruction = instruction.with_gas_budget(gas_budget)
        return instruction

    def _move_call(self, sender_address: str, function: str, *arguments) -> MoveCallInstruction:
        # move_target raises ConfigurationError when the module is not configured
        self.config.move_target(function)
        return MoveCallInstruction(
            sender=sender_address,
            package_id=self.config.package_id,
            module=self.config.module_name,
            function=function,
            arguments=tuple(arguments),
        )

    def verify_object(
        self,
        object_id: str,
        expected_type: str,
        owner: Optional[str] = None,
        label: str = "Wallet"
    ) -> ObjectData:
        """
        Check that an object exists, has the expected type and, when it is
        address-owned and `owner` is given, belongs to `owner`.

        Raises:
            InvalidWalletObjectError: If any check fails
        """
        obj = self.transport.get_object(object_id)
        if obj is None:
            raise InvalidWalletObjectError(f"{label} object {object_id} does not exist")
        if obj.type != expected_type:
            raise InvalidWalletObjectError(
                f"Object {object_id} is not a {label} object (type {obj.type}, expected {expected_type})"
            )
        if owner and obj.owner_address and obj.owner_address.lower() != owner.lower():
            raise InvalidWalletObjectError(
                f"{label} object {object_id} is owned by {obj.owner_address}, not {owner}"
            )
        return obj

    def find_wallet_object(self, owner: str) -> Optional[str]:
        """
        Find the Wallet object owned by an address.

        Returns:
            The object id, or None if the address owns no Wallet object
        """
        owner = validate_address(owner, "owner address")
        wallet_type = self.config.wallet_type
        cursor = None
        for _ in range(MAX_OWNED_OBJECT_PAGES):
            page = self.transport.get_owned_objects(owner, struct_type=wallet_type, cursor=cursor)
            for obj in page.data:
                if obj.type == wallet_type:
                    self.logger.debug(f"Found Wallet object {obj.object_id} for {owner}")
                    return obj.object_id
            if not page.has_next_page:
                break
            cursor = page.next_cursor
        self.logger.info(f"No Wallet object found for address {owner}")
        return None

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _execute(self, instruction: TransferInstruction, keypair: KeyPair) -> TransactionResult:
        """
        Build, sign and execute an instruction.

        Raises:
            LedgerTransportError: If the node cannot be reached or rejects the call
            TransactionRejected: If the node executed the transaction but it failed
            IntegrationError: If the response is missing digest or effects
        """
        if instruction.sender != keypair.address:
            raise ValidationError(
                f"Instruction sender {instruction.sender} does not match signing key address {keypair.address}"
            )
        tx_bytes = self.transport.build_transaction(instruction)
        signature = sign_transaction(tx_bytes, keypair)
        self.logger.debug(f"Submitting {instruction.describe()} with gas budget {instruction.gas_budget}")

        result = self.transport.execute(tx_bytes, [signature])
        self.logger.info(f"Transaction sent: {result.digest}")

        status = result.effects.status
        if not status.ok:
            raise TransactionRejected(status.error or "Unknown error", digest=result.digest)
        return result

    def submit(self, instruction: TransferInstruction, keypair: KeyPair) -> TransferOutcome:
        """
        Sign and submit an instruction that already carries a gas budget.

        Not idempotent: submitting the same instruction twice is two transfers.
        """
        progress = _Progress(stage=TransferStage.SUBMITTING, sender=keypair.address)
        try:
            result = self._execute(instruction, keypair)
        except Exception as e:
            return self._failure("Submission", e, progress)
        return self._success(result, progress)

    def _advance(self, progress: _Progress, stage: TransferStage) -> None:
        self.logger.debug("Stage %s -> %s (sender %s)", progress.stage.value, stage.value, progress.sender)
        progress.stage = stage

    def _fund_and_submit(
        self,
        instruction: TransferInstruction,
        keypair: KeyPair,
        amount: int,
        progress: _Progress
    ) -> TransferOutcome:
        self._advance(progress, TransferStage.BUILDING)
        gas_budget = self.resolve_gas_budget(instruction, amount)
        instruction = instruction.with_gas_budget(gas_budget)

        self._advance(progress, TransferStage.CHECKING_BALANCE)
        self.check_sufficiency(keypair.address, amount, gas_budget)

        self._advance(progress, TransferStage.SUBMITTING)
        result = self._execute(instruction, keypair)
        return self._success(result, progress)

    def _success(self, result: TransactionResult, progress: _Progress) -> TransferOutcome:
        self._advance(progress, TransferStage.SUCCEEDED)
        return TransferOutcome(
            success=True,
            transaction_digest=result.digest,
            sender_address=progress.sender
        )

    def _failure(self, operation: str, error: Exception, progress: _Progress, outcome_type=TransferOutcome):
        """Convert an exception into a failed outcome and log it."""
        stage = progress.stage
        self._advance(progress, TransferStage.FAILED)
        if isinstance(error, SuiWalletError):
            message = str(error)
            code = type(error).__name__
            if isinstance(error, IntegrationError):
                self.logger.error(
                    "%s failed at stage %s for sender %s: %s",
                    operation, stage.value, progress.sender, message, exc_info=True
                )
            else:
                self.logger.error("%s failed at stage %s: %s", operation, stage.value, message)
        else:
            message = f"Internal error: {error}"
            code = INTERNAL_ERROR_CODE
            self.logger.exception("Unexpected error during %s at stage %s", operation.lower(), stage.value)
        return outcome_type(success=False, error=message, error_code=code)

    def _validate_amount(self, amount: Amount, unit: str) -> int:
        amount_mist = parse_amount(amount, unit)
        minimum = self.config.min_amount_mist
        if minimum and amount_mist < minimum:
            raise InvalidAmountError(f"Amount too small: {amount_mist} MIST, minimum {minimum} MIST")
        return amount_mist

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def transfer(
        self,
        recipient_address: str,
        amount: Amount,
        sender_private_key: Optional[str] = None,
        unit: str = "mist"
    ) -> TransferOutcome:
        """
        Send native SUI from the sender's gas coin to an address.

        Args:
            recipient_address: 0x-prefixed 64 hex character address
            amount: Amount in `unit`
            sender_private_key: Hex private key; the configured key when omitted
            unit: "mist" or "sui"

        Returns:
            TransferOutcome
        """
        progress = _Progress()
        try:
            recipient = validate_address(recipient_address, "recipient address")
            amount_mist = self._validate_amount(amount, unit)

            self._advance(progress, TransferStage.DERIVING)
            keypair = self.derive_identity(sender_private_key)
            progress.sender = keypair.address
            self.logger.info(f"Funding {amount_mist} MIST to {recipient} from {keypair.address}")

            self._advance(progress, TransferStage.BUILDING)
            instruction = self.build_transfer_instruction(keypair.address, recipient, amount_mist)
            return self._fund_and_submit(instruction, keypair, amount_mist, progress)
        except Exception as e:
            return self._failure("Transfer", e, progress)

    def _source_wallet(self, keypair: KeyPair, source_wallet_id: Optional[str]) -> str:
        source = source_wallet_id or self.config.sender_wallet_object_id or self.find_wallet_object(keypair.address)
        if not source:
            raise InvalidWalletObjectError(
                f"Sender ({keypair.address}) does not have a Wallet object. "
                "A Wallet object is required to transfer funds."
            )
        return source

    def transfer_to_wallet(
        self,
        destination_wallet_id: str,
        amount: Amount,
        sender_private_key: Optional[str] = None,
        source_wallet_id: Optional[str] = None,
        unit: str = "mist"
    ) -> TransferOutcome:
        """
        Move value between two Wallet objects through the Wallet module.

        The source Wallet defaults to the configured one, then to the Wallet
        object owned by the sender.
        """
        progress = _Progress()
        try:
            destination = validate_address(destination_wallet_id, "recipient wallet id")
            if source_wallet_id is not None:
                source_wallet_id = validate_address(source_wallet_id, "source wallet id")
            amount_mist = self._validate_amount(amount, unit)
            wallet_type = self.config.wallet_type

            self._advance(progress, TransferStage.DERIVING)
            keypair = self.derive_identity(sender_private_key)
            progress.sender = keypair.address

            self._advance(progress, TransferStage.BUILDING)
            source = self._source_wallet(keypair, source_wallet_id)
            self.verify_object(source, wallet_type, owner=keypair.address)
            self.verify_object(destination, wallet_type)
            instruction = self.build_transfer_instruction(
                keypair.address, destination, amount_mist,
                source_wallet_id=source, recipient_is_wallet=True
            )
            return self._fund_and_submit(instruction, keypair, amount_mist, progress)
        except Exception as e:
            return self._failure("Transfer", e, progress)

    def transfer_to_address(
        self,
        recipient_address: str,
        amount: Amount,
        sender_private_key: Optional[str] = None,
        source_wallet_id: Optional[str] = None,
        unit: str = "mist"
    ) -> TransferOutcome:
        """Move value out of a Wallet object to a bare address through the Wallet module."""
        progress = _Progress()
        try:
            recipient = validate_address(recipient_address, "recipient address")
            if source_wallet_id is not None:
                source_wallet_id = validate_address(source_wallet_id, "source wallet id")
            amount_mist = self._validate_amount(amount, unit)
            wallet_type = self.config.wallet_type

            self._advance(progress, TransferStage.DERIVING)
            keypair = self.derive_identity(sender_private_key)
            progress.sender = keypair.address

            self._advance(progress, TransferStage.BUILDING)
            source = self._source_wallet(keypair, source_wallet_id)
            self.verify_object(source, wallet_type, owner=keypair.address)
            instruction = self.build_transfer_instruction(
                keypair.address, recipient, amount_mist, source_wallet_id=source
            )
            return self._fund_and_submit(instruction, keypair, amount_mist, progress)
        except Exception as e:
            return self._failure("Transfer", e, progress)

    def deposit_to_wallet(
        self,
        wallet_id: str,
        coin_object_id: str,
        sender_private_key: Optional[str] = None
    ) -> TransferOutcome:
        """
        Deposit a SUI coin owned by the sender into a Wallet object.

        Gas is paid from the sender's other coins, so the balance must cover
        the coin's value plus the gas budget.
        """
        progress = _Progress()
        try:
            wallet_id = validate_address(wallet_id, "wallet object id")
            coin_object_id = validate_address(coin_object_id, "coin object id")
            wallet_type = self.config.wallet_type

            self._advance(progress, TransferStage.DERIVING)
            keypair = self.derive_identity(sender_private_key)
            progress.sender = keypair.address

            self._advance(progress, TransferStage.BUILDING)
            self.verify_object(wallet_id, wallet_type)
            coin = self.verify_object(coin_object_id, SUI_COIN_OBJECT_TYPE, owner=keypair.address, label="Coin")
            amount_mist = self._coin_value(coin)
            self.logger.info(f"Depositing {amount_mist} MIST to wallet {wallet_id}")

            instruction = self._move_call(keypair.address, "deposit", wallet_id, coin_object_id)
            return self._fund_and_submit(instruction, keypair, amount_mist, progress)
        except Exception as e:
            return self._failure("Deposit", e, progress)

    def receive_to_wallet(
        self,
        wallet_id: str,
        coin_object_id: str,
        sender_private_key: Optional[str] = None
    ) -> TransferOutcome:
        """
        Claim a SUI coin that was sent to a Wallet object's id into its balance.

        The coin already belongs to the Wallet, so the sender only pays gas.
        """
        progress = _Progress()
        try:
            wallet_id = validate_address(wallet_id, "wallet object id")
            coin_object_id = validate_address(coin_object_id, "coin object id")
            wallet_type = self.config.wallet_type

            self._advance(progress, TransferStage.DERIVING)
            keypair = self.derive_identity(sender_private_key)
            progress.sender = keypair.address

            self._advance(progress, TransferStage.BUILDING)
            self.verify_object(wallet_id, wallet_type, owner=keypair.address)
            coin = self.verify_object(coin_object_id, SUI_COIN_OBJECT_TYPE, owner=wallet_id, label="Coin")
            self.logger.info(f"Receiving {self._coin_value(coin)} MIST into wallet {wallet_id}")

            instruction = self._move_call(keypair.address, "receive", wallet_id, coin_object_id)
            return self._fund_and_submit(instruction, keypair, 0, progress)
        except Exception as e:
            return self._failure("Receive", e, progress)

    @staticmethod
    def _coin_value(coin: ObjectData) -> int:
        fields = (coin.content or {}).get("fields") or {}
        try:
            return int(fields["balance"])
        except (KeyError, TypeError, ValueError) as e:
            raise IntegrationError(f"Coin object {coin.object_id} has no readable balance field") from e

    def create_wallet(self, owner_address: str) -> WalletCreationOutcome:
        """
        Create a Wallet object on-chain for an address.

        The transaction is signed, and its gas paid, by the configured
        default credential.
        """
        progress = _Progress()
        try:
            owner = validate_address(owner_address, "owner address")
            event_type = self.config.wallet_created_event_type

            self._advance(progress, TransferStage.DERIVING)
            keypair = self.derive_identity()
            progress.sender = keypair.address
            self.logger.info(f"Creating Wallet for {owner}, gas paid by {keypair.address}")

            self._advance(progress, TransferStage.BUILDING)
            instruction = self._move_call(keypair.address, "create_address", owner)
            gas_budget = self.resolve_gas_budget(instruction)
            instruction = instruction.with_gas_budget(gas_budget)

            self._advance(progress, TransferStage.CHECKING_BALANCE)
            self.check_sufficiency(keypair.address, 0, gas_budget)

            self._advance(progress, TransferStage.SUBMITTING)
            result = self._execute(instruction, keypair)
            wallet_object_id = self._created_wallet_id(result, event_type, owner)
            self._advance(progress, TransferStage.SUCCEEDED)
            self.logger.info(f"Wallet created with object ID: {wallet_object_id}, owner: {owner}")
            return WalletCreationOutcome(
                success=True,
                wallet_object_id=wallet_object_id,
                wallet_address=owner,
                transaction_digest=result.digest,
                sender_address=keypair.address
            )
        except Exception as e:
            return self._failure("Wallet creation", e, progress, outcome_type=WalletCreationOutcome)

    @staticmethod
    def _created_wallet_id(result: TransactionResult, event_type: str, owner: str) -> str:
        """
        Read the new Wallet object id from effects and check the creation event.

        Raises:
            IntegrationError: If the created object or event is missing or names another owner
        """
        if not result.effects.created:
            raise IntegrationError(
                f"Failed to extract Wallet object ID from transaction effects (digest {result.digest})"
            )
        event = next((e for e in result.events if e.type == event_type), None)
        parsed = (event.parsed_json or {}) if event else {}
        event_wallet_id = parsed.get("wallet_id")
        event_owner = parsed.get("owner")
        if not event_wallet_id or not event_owner:
            raise IntegrationError(
                f"Failed to extract WalletCreatedEvent, wallet_id, or owner (digest {result.digest})"
            )
        if event_owner.lower() != owner.lower():
            raise IntegrationError(
                f"On-chain owner ({event_owner}) does not match the requested address ({owner})"
            )

        created_ids = [ref.reference.object_id for ref in result.effects.created]
        if event_wallet_id in created_ids:
            return event_wallet_id
        return created_ids[0]
